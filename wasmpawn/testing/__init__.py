"""Test doubles for the compiler module."""

from .fake_module import CONSOLE_HEADER, FakeCompilerModule, FakeModuleLoader, build_artifact

__all__ = ["CONSOLE_HEADER", "FakeCompilerModule", "FakeModuleLoader", "build_artifact"]
