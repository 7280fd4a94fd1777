"""CHIP-8 instruction decoding."""

from enum import IntEnum

from chex import dataclass


class Kind(IntEnum):
    """Instruction kinds, one per distinct CHIP-8 operation."""
    SYS = 0
    CLS = 1
    RET = 2
    JP = 3
    CALL = 4
    SE_VX_BYTE = 5
    SNE_VX_BYTE = 6
    SE_VX_VY = 7
    LD_VX_BYTE = 8
    ADD_VX_BYTE = 9
    LD_VX_VY = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_VX_VY = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_VX_VY = 19
    LD_I_ADDR = 20
    JP_V0_ADDR = 21
    RND = 22
    DRW = 23
    SKP = 24
    SKNP = 25
    LD_VX_DT = 26
    LD_VX_K = 27
    LD_DT_VX = 28
    LD_ST_VX = 29
    ADD_I_VX = 30
    LD_F_VX = 31
    LD_B_VX = 32
    LD_MEM_VX = 33
    LD_VX_MEM = 34
    UNKNOWN = 35


# (mask, value, kind); first match wins, so exact 0x00E0/0x00EE precede 0NNN
PATTERNS: tuple[tuple[int, int, Kind], ...] = (
    (0xFFFF, 0x00E0, Kind.CLS),
    (0xFFFF, 0x00EE, Kind.RET),
    (0xF000, 0x0000, Kind.SYS),
    (0xF000, 0x1000, Kind.JP),
    (0xF000, 0x2000, Kind.CALL),
    (0xF000, 0x3000, Kind.SE_VX_BYTE),
    (0xF000, 0x4000, Kind.SNE_VX_BYTE),
    (0xF000, 0x5000, Kind.SE_VX_VY),
    (0xF000, 0x6000, Kind.LD_VX_BYTE),
    (0xF000, 0x7000, Kind.ADD_VX_BYTE),
    (0xF00F, 0x8000, Kind.LD_VX_VY),
    (0xF00F, 0x8001, Kind.OR),
    (0xF00F, 0x8002, Kind.AND),
    (0xF00F, 0x8003, Kind.XOR),
    (0xF00F, 0x8004, Kind.ADD_VX_VY),
    (0xF00F, 0x8005, Kind.SUB),
    (0xF00F, 0x8006, Kind.SHR),
    (0xF00F, 0x8007, Kind.SUBN),
    (0xF00F, 0x800E, Kind.SHL),
    (0xF000, 0x9000, Kind.SNE_VX_VY),
    (0xF000, 0xA000, Kind.LD_I_ADDR),
    (0xF000, 0xB000, Kind.JP_V0_ADDR),
    (0xF000, 0xC000, Kind.RND),
    (0xF000, 0xD000, Kind.DRW),
    (0xF0FF, 0xE09E, Kind.SKP),
    (0xF0FF, 0xE0A1, Kind.SKNP),
    (0xF0FF, 0xF007, Kind.LD_VX_DT),
    (0xF0FF, 0xF00A, Kind.LD_VX_K),
    (0xF0FF, 0xF015, Kind.LD_DT_VX),
    (0xF0FF, 0xF018, Kind.LD_ST_VX),
    (0xF0FF, 0xF01E, Kind.ADD_I_VX),
    (0xF0FF, 0xF029, Kind.LD_F_VX),
    (0xF0FF, 0xF033, Kind.LD_B_VX),
    (0xF0FF, 0xF055, Kind.LD_MEM_VX),
    (0xF0FF, 0xF065, Kind.LD_VX_MEM),
)

MNEMONICS: dict[Kind, str] = {
    Kind.SYS: "SYS {nnn:03X}",
    Kind.CLS: "CLS",
    Kind.RET: "RET",
    Kind.JP: "JMP {nnn:03X}",
    Kind.CALL: "CALL {nnn:03X}",
    Kind.SE_VX_BYTE: "SE V{x:X}, {nn:02X}",
    Kind.SNE_VX_BYTE: "SNE V{x:X}, {nn:02X}",
    Kind.SE_VX_VY: "SE V{x:X}, V{y:X}",
    Kind.LD_VX_BYTE: "LD V{x:X}, {nn:02X}",
    Kind.ADD_VX_BYTE: "ADD V{x:X}, {nn:02X}",
    Kind.LD_VX_VY: "LD V{x:X}, V{y:X}",
    Kind.OR: "OR V{x:X}, V{y:X}",
    Kind.AND: "AND V{x:X}, V{y:X}",
    Kind.XOR: "XOR V{x:X}, V{y:X}",
    Kind.ADD_VX_VY: "ADD V{x:X}, V{y:X}",
    Kind.SUB: "SUB V{x:X}, V{y:X}",
    Kind.SHR: "SHR V{x:X}",
    Kind.SUBN: "SUBN V{x:X}, V{y:X}",
    Kind.SHL: "SHL V{x:X}",
    Kind.SNE_VX_VY: "SNE V{x:X}, V{y:X}",
    Kind.LD_I_ADDR: "LD I, {nnn:03X}",
    Kind.JP_V0_ADDR: "JP V0, {nnn:03X}",
    Kind.RND: "RND V{x:X}, {nn:02X}",
    Kind.DRW: "DRW V{x:X}, V{y:X}, {n:X}",
    Kind.SKP: "SKP V{x:X}",
    Kind.SKNP: "SKNP V{x:X}",
    Kind.LD_VX_DT: "LD V{x:X}, DT",
    Kind.LD_VX_K: "LD V{x:X}, K",
    Kind.LD_DT_VX: "LD DT, V{x:X}",
    Kind.LD_ST_VX: "LD ST, V{x:X}",
    Kind.ADD_I_VX: "ADD I, V{x:X}",
    Kind.LD_F_VX: "LD F, V{x:X}",
    Kind.LD_B_VX: "LD B, V{x:X}",
    Kind.LD_MEM_VX: "LD [I], V{x:X}",
    Kind.LD_VX_MEM: "LD V{x:X}, [I]",
    Kind.UNKNOWN: "??? {opcode:04X}",
}


@dataclass(frozen=True)
class DecodedInstruction:
    """Decoded CHIP-8 instruction with extracted operands."""
    opcode: int  # Full 16-bit instruction
    kind: Kind
    family: int  # First nibble
    x: int       # Second nibble (VX register)
    y: int       # Third nibble (VY register)
    n: int       # Fourth nibble (4-bit immediate)
    nn: int      # Last byte (8-bit immediate)
    nnn: int     # Last 12 bits (12-bit address)

    @property
    def mnemonic(self) -> str:
        """Assembly text for this instruction, e.g. ``LD V1, AA``."""
        return MNEMONICS[self.kind].format(
            opcode=self.opcode, x=self.x, y=self.y, n=self.n, nn=self.nn, nnn=self.nnn
        )

    @property
    def is_known(self) -> bool:
        return self.kind != Kind.UNKNOWN

    def __str__(self) -> str:
        return f"{self.opcode:04X}"


def classify(opcode: int) -> Kind:
    """Map a 16-bit opcode to its instruction kind."""
    for mask, value, kind in PATTERNS:
        if opcode & mask == value:
            return kind
    return Kind.UNKNOWN


def decode(instruction: int) -> DecodedInstruction:
    """Decode 16-bit instruction into components."""
    instruction = int(instruction) & 0xFFFF
    return DecodedInstruction(
        opcode=instruction,
        kind=classify(instruction),
        family=(instruction & 0xF000) >> 12,
        x=(instruction & 0x0F00) >> 8,
        y=(instruction & 0x00F0) >> 4,
        n=instruction & 0x000F,
        nn=instruction & 0x00FF,
        nnn=instruction & 0x0FFF
    )
