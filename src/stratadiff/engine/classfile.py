"""JVM class file disassembly into a diffable text document.

The document lists the class file version, every UTF-8 constant in pool
order, and the bytecode of each method's Code attribute as hex octets.
Fields and all other attributes are consumed but not printed.
"""

from __future__ import annotations

import struct
from typing import Dict, List, Optional

CLASS_MAGIC = b"\xca\xfe\xba\xbe"

_TAG_UTF8 = 1
_TAG_LONG = 5
_TAG_DOUBLE = 6

# Fixed payload widths of every non-UTF-8 constant pool tag
_CONSTANT_WIDTHS: Dict[int, int] = {
    3: 4,   # Integer
    4: 4,   # Float
    5: 8,   # Long
    6: 8,   # Double
    7: 2,   # Class
    8: 2,   # String
    9: 4,   # Fieldref
    10: 4,  # Methodref
    11: 4,  # InterfaceMethodref
    12: 4,  # NameAndType
    15: 3,  # MethodHandle
    16: 2,  # MethodType
    17: 4,  # Dynamic
    18: 4,  # InvokeDynamic
    19: 2,  # Module
    20: 2,  # Package
}

_HEX_PER_LINE = 16


class ClassFormatError(Exception):
    """The data is not a parseable class file."""


class ClassFileReader:
    """Bounds-checked big-endian cursor over class file bytes."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.pos = 0

    def read(self, n: int) -> bytes:
        if n < 0 or self.pos + n > len(self.data):
            raise ClassFormatError(f"read of {n} bytes beyond end of class file at {self.pos}")
        chunk = self.data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    def skip(self, n: int) -> None:
        self.read(n)

    def u1(self) -> int:
        return self.read(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.read(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.read(4))[0]


def _read_constant_pool(r: ClassFileReader) -> Dict[int, str]:
    """Return UTF-8 constants keyed by pool index (insertion order = pool order)."""
    count = r.u2()
    utf8: Dict[int, str] = {}
    index = 1
    while index < count:
        tag = r.u1()
        if tag == _TAG_UTF8:
            length = r.u2()
            utf8[index] = r.read(length).decode("utf-8", errors="replace")
        elif tag in _CONSTANT_WIDTHS:
            r.skip(_CONSTANT_WIDTHS[tag])
            if tag in (_TAG_LONG, _TAG_DOUBLE):
                index += 1  # eight-byte constants occupy two slots
        else:
            raise ClassFormatError(f"unknown constant pool tag {tag} at index {index}")
        index += 1
    return utf8


def _skip_attributes(r: ClassFileReader) -> None:
    for _ in range(r.u2()):
        r.skip(2)
        r.skip(r.u4())


def _probe_code(r: ClassFileReader, length: int) -> Optional[bytes]:
    """Parse a Code attribute body, or return None (cursor restored) if it does not fit."""
    start = r.pos
    try:
        if length < 8:
            raise ClassFormatError("attribute too short for Code")
        r.skip(4)  # max_stack, max_locals
        code_length = r.u4()
        if code_length > length - 8:
            raise ClassFormatError("code length exceeds attribute")
        code = r.read(code_length)
    except ClassFormatError:
        r.pos = start
        return None
    r.skip(length - 8 - code_length)  # exception table and nested attributes
    return code


def _format_code(code: bytes) -> List[str]:
    chunks = [code[i : i + _HEX_PER_LINE] for i in range(0, len(code), _HEX_PER_LINE)] or [b""]
    return ["".join(f" {b:02x}" for b in chunk) + "\n" for chunk in chunks]


def disassemble_class(data: bytes) -> str:
    """Render *data* as a deterministic text document. Raises :class:`ClassFormatError`."""
    if len(data) < 8:
        raise ClassFormatError("class file too short")
    if data[:4] != CLASS_MAGIC:
        raise ClassFormatError("invalid class file magic number")

    r = ClassFileReader(data)
    r.skip(4)
    minor = r.u2()
    major = r.u2()
    out: List[str] = [f"Class file version: {major}.{minor}\n"]

    utf8 = _read_constant_pool(r)
    if utf8:
        out.append("UTF-8 strings:\n")
        out.extend(f"  {s}\n" for s in utf8.values())

    r.skip(6)  # access_flags, this_class, super_class
    r.skip(2 * r.u2())  # interfaces

    for _ in range(r.u2()):  # fields
        r.skip(6)
        _skip_attributes(r)

    methods_count = r.u2()
    if methods_count:
        out.append("Method opcodes:\n")
    for method in range(methods_count):
        r.skip(6)  # access_flags, name_index, descriptor_index
        for _ in range(r.u2()):
            name = utf8.get(r.u2())
            length = r.u4()
            # Unresolvable names fall back to probing the body's shape.
            code = _probe_code(r, length) if name in (None, "Code") else None
            if code is None:
                r.skip(length)
                continue
            out.append(f"  Method {method}:\n")
            out.extend(_format_code(code))
    return "".join(out)
