"""Error kinds raised by the CHIP-8 core."""


class Chip8Error(Exception):
    """Base class for every error raised by the emulator core."""


class UnknownInstruction(Chip8Error):
    """Opcode matched no known instruction pattern."""

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Unknown instruction {opcode:04X} at {address:03X}")


class StackOverflow(Chip8Error):
    """CALL with all stack slots in use."""

    def __init__(self, address: int, depth: int):
        self.address = address
        self.depth = depth
        super().__init__(f"Stack overflow pushing {address:03X} (depth {depth})")


class StackUnderflow(Chip8Error):
    """RET with an empty stack."""

    def __init__(self):
        super().__init__("Stack underflow: return with empty stack")


class AddressOutOfRange(Chip8Error):
    """Memory access outside the 4 KiB address space."""

    def __init__(self, address: int, length: int = 1):
        self.address = address
        self.length = length
        if length == 1:
            message = f"Address {address:#06x} is outside memory"
        else:
            message = f"Range {address:#06x}+{length} is outside memory"
        super().__init__(message)


class RomLoadError(Chip8Error):
    """ROM could not be read or placed into memory."""


class RomTooLarge(RomLoadError):
    """ROM does not fit between the program start and the end of memory."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"ROM is {size} bytes, maximum is {limit}")
