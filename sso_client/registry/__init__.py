"""Typed model registry and the serialization machinery built on it.

- **descriptor**: Immutable field and model descriptors
- **type_spec**: Parsing of declared type strings
- **registry**: Lookup of descriptors, model classes and enums by name
- **serializer**: Conversion between instances and wire objects
- **codec**: orjson encoding and decoding of wire payloads
- **timestamps**: Wire format of ``Date`` fields
"""
