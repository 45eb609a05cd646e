"""YAML front-end: declare factories and sequences in files.

- schemas.py: pydantic models for the file format
- compiler.py: turns validated specs into registry definitions
"""

from .schemas import AttributeSpec, FactoryFile, FactorySpec, SequenceSpec
from .compiler import (
    compile_attribute,
    compile_factory,
    compile_factory_file,
    import_model_modules,
    load_factories,
    load_factory_file,
    read_factory_file,
    register_model_modules,
)

__all__ = [
    "AttributeSpec",
    "FactoryFile",
    "FactorySpec",
    "SequenceSpec",
    "compile_attribute",
    "compile_factory",
    "compile_factory_file",
    "import_model_modules",
    "load_factories",
    "load_factory_file",
    "read_factory_file",
    "register_model_modules",
]
