"""
68000 opcode dispatch.

Each primary group (bits 15-12 of the instruction word) owns an ordered
tuple of `(predicate, decoder)` rules. Rules are tried top to bottom and the
first matching predicate wins. Several encodings overlap (MOVEP inside the
bit-operation space, ADDX inside ADD, the CCR/SR immediates inside the
general immediate forms), so the order of each table is significant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .bind import (
    AddrDisp,
    AddrReg,
    BranchDisp,
    DataReg,
    DecodedInstr,
    Immediate,
    Operand,
    PostIncrement,
    PreDecrement,
    Quick,
    RegList,
    Size,
    SpecialReg,
)
from .ea import read_immediate, resolve_ea
from .errors import UnknownInstruction
from .reader import StreamCtx, sign_extend
from .tables import (
    BIT_OPS,
    IMMEDIATE_OPS,
    MOVE_SIZES,
    SHIFT_OPS,
    UNARY_OPS,
    condition_name,
    movem_register_names,
)


@dataclass(frozen=True)
class Fields:
    """Canonical bit fields of an instruction word."""

    word: int

    @property
    def group(self) -> int:
        return (self.word >> 12) & 0x0F

    @property
    def rx(self) -> int:
        return (self.word >> 9) & 0x07

    @property
    def opmode(self) -> int:
        return (self.word >> 6) & 0x07

    @property
    def size(self) -> int:
        return (self.word >> 6) & 0x03

    @property
    def mode(self) -> int:
        return (self.word >> 3) & 0x07

    @property
    def reg(self) -> int:
        return self.word & 0x07

    @property
    def bit8(self) -> int:
        return (self.word >> 8) & 0x01

    @property
    def cond(self) -> int:
        return (self.word >> 8) & 0x0F


Predicate = Callable[[Fields], bool]
DecoderFunc = Callable[[Fields, StreamCtx], DecodedInstr]
Rule = Tuple[Predicate, DecoderFunc]


def _instr(
    f: Fields,
    ctx: StreamCtx,
    mnemonic: str,
    size: Optional[int] = None,
    *operands: Operand,
) -> DecodedInstr:
    return DecodedInstr(
        address=ctx.pc,
        opcode=f.word,
        mnemonic=mnemonic,
        size=None if size is None else Size(size),
        operands=tuple(operands),
        length=ctx.bytes_consumed(),
        layout=ctx.snapshot_layout(),
    )


def _ea(f: Fields, ctx: StreamCtx, size: Optional[int] = None, key: str = "ea"):
    return resolve_ea(ctx, f.mode, f.reg, size, key)


def _exact(word: int) -> Predicate:
    return lambda f: f.word == word


def _masked(mask: int, value: int) -> Predicate:
    return lambda f: (f.word & mask) == value


# ---------------------------------------------------------------------------
# 0000 Bit Manipulation/MOVEP/Immediate


def _dec_imm_to_ccr(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        data = read_immediate(ctx, Size.BYTE)
        return _instr(f, ctx, mnemonic, None, Immediate(data, Size.BYTE), SpecialReg("CCR"))

    return decode


def _dec_imm_to_sr(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        data = read_immediate(ctx, Size.WORD)
        return _instr(f, ctx, mnemonic, None, Immediate(data, Size.WORD), SpecialReg("SR"))

    return decode


def _dec_imm_op(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    data = read_immediate(ctx, f.size, "src")
    dst = _ea(f, ctx, f.size, "dst")
    return _instr(f, ctx, IMMEDIATE_OPS[f.rx], f.size, Immediate(data, Size(f.size)), dst)


def _dec_bit_static(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    start = ctx.bytes_consumed()
    # Bit numbers wrap modulo 32 for every destination.
    bit = ctx.read_u16() % 32
    ctx.record_operand("bit", "bitnum", start=start)
    dst = _ea(f, ctx, Size.BYTE, "dst")
    return _instr(f, ctx, BIT_OPS[f.size], None, Immediate(bit, Size.BYTE), dst)


def _dec_bit_dynamic(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    dst = _ea(f, ctx, Size.BYTE, "dst")
    return _instr(f, ctx, BIT_OPS[f.size], None, DataReg(f.rx), dst)


def _dec_movep(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    start = ctx.bytes_consumed()
    mem = AddrDisp(f.reg, ctx.read_s16())
    ctx.record_operand("ea", "d16_an", start=start)
    size = Size.LONG if f.opmode & 1 else Size.WORD
    if f.opmode & 0x02:
        return _instr(f, ctx, "MOVEP", size, DataReg(f.rx), mem)
    return _instr(f, ctx, "MOVEP", size, mem, DataReg(f.rx))


GROUP_0: Tuple[Rule, ...] = (
    (_exact(0x003C), _dec_imm_to_ccr("ORI")),
    (_exact(0x023C), _dec_imm_to_ccr("ANDI")),
    (_exact(0x0A3C), _dec_imm_to_ccr("EORI")),
    (_exact(0x007C), _dec_imm_to_sr("ORI")),
    (_exact(0x027C), _dec_imm_to_sr("ANDI")),
    (_exact(0x0A7C), _dec_imm_to_sr("EORI")),
    (lambda f: not f.bit8 and f.rx in IMMEDIATE_OPS and f.size < 3, _dec_imm_op),
    (lambda f: not f.bit8 and f.rx == 4, _dec_bit_static),
    (lambda f: f.bit8 and f.mode == 1, _dec_movep),
    (lambda f: f.bit8, _dec_bit_dynamic),
)


# ---------------------------------------------------------------------------
# 0001 Move Byte / 0010 Move Long / 0011 Move Word


def _dec_move(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    size = MOVE_SIZES[f.group]
    src = _ea(f, ctx, size, "src")
    dst_mode = f.opmode
    if dst_mode == 1:
        if size == Size.BYTE:
            raise UnknownInstruction(f"Unknown instruction {f.word:#06x}: MOVEA.B")
        return _instr(f, ctx, "MOVEA", size, src, AddrReg(f.rx))
    dst = resolve_ea(ctx, dst_mode, f.rx, size, "dst")
    return _instr(f, ctx, "MOVE", size, src, dst)


GROUP_MOVE: Tuple[Rule, ...] = ((lambda f: True, _dec_move),)


# ---------------------------------------------------------------------------
# 0100 Miscellaneous


def _dec_simple(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        return _instr(f, ctx, mnemonic)

    return decode


def _dec_stop(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    data = read_immediate(ctx, Size.WORD)
    return _instr(f, ctx, "STOP", None, Immediate(data, Size.WORD))


def _dec_trap(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "TRAP", None, Quick(f.word & 0x0F))


def _dec_link(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    disp = read_immediate(ctx, Size.WORD, "disp")
    return _instr(f, ctx, "LINK", None, AddrReg(f.reg), Immediate(disp, Size.WORD))


def _dec_unlk(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "UNLK", None, AddrReg(f.reg))


def _dec_move_usp(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    if f.word & 0x08:
        return _instr(f, ctx, "MOVE", None, SpecialReg("USP"), AddrReg(f.reg))
    return _instr(f, ctx, "MOVE", None, AddrReg(f.reg), SpecialReg("USP"))


def _dec_control(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        return _instr(f, ctx, mnemonic, None, _ea(f, ctx, Size.LONG))

    return decode


def _dec_lea(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "LEA", None, _ea(f, ctx, Size.LONG, "src"), AddrReg(f.rx))


def _dec_chk(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "CHK", Size.WORD, _ea(f, ctx, Size.WORD, "src"), DataReg(f.rx))


def _dec_unary(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, UNARY_OPS[f.rx], f.size, _ea(f, ctx, f.size))


def _dec_move_from_sr(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "MOVE", None, SpecialReg("SR"), _ea(f, ctx, Size.WORD, "dst"))


def _dec_move_from_ccr(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "MOVE", None, SpecialReg("CCR"), _ea(f, ctx, Size.WORD, "dst"))


def _dec_move_to_ccr(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "MOVE", None, _ea(f, ctx, Size.WORD, "src"), SpecialReg("CCR"))


def _dec_move_to_sr(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "MOVE", None, _ea(f, ctx, Size.WORD, "src"), SpecialReg("SR"))


def _dec_nbcd(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "NBCD", None, _ea(f, ctx, Size.BYTE))


def _dec_swap(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "SWAP", None, DataReg(f.reg))


def _dec_pea(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "PEA", None, _ea(f, ctx, Size.LONG))


def _dec_ext(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    size = Size.WORD if f.opmode == 2 else Size.LONG
    return _instr(f, ctx, "EXT", size, DataReg(f.reg))


def _dec_tas(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "TAS", None, _ea(f, ctx, Size.BYTE))


def _dec_movem(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    size = Size.WORD if f.opmode == 2 else Size.LONG
    memory_to_register = f.rx == 6
    start = ctx.bytes_consumed()
    mask = ctx.read_u16()
    ctx.record_operand("mask", "reglist", start=start)
    regs = RegList(mask, movem_register_names(mask, memory_to_register))
    ea = _ea(f, ctx, size)
    if memory_to_register:
        return _instr(f, ctx, "MOVEM", size, ea, regs)
    return _instr(f, ctx, "MOVEM", size, regs, ea)


GROUP_4: Tuple[Rule, ...] = (
    (_exact(0x4AFC), _dec_simple("ILLEGAL")),
    (_exact(0x4E70), _dec_simple("RESET")),
    (_exact(0x4E71), _dec_simple("NOP")),
    (_exact(0x4E72), _dec_stop),
    (_exact(0x4E73), _dec_simple("RTE")),
    (_exact(0x4E75), _dec_simple("RTS")),
    (_exact(0x4E76), _dec_simple("TRAPV")),
    (_exact(0x4E77), _dec_simple("RTR")),
    (_masked(0xFFF0, 0x4E40), _dec_trap),
    (_masked(0xFFF8, 0x4E50), _dec_link),
    (_masked(0xFFF8, 0x4E58), _dec_unlk),
    (_masked(0xFFF0, 0x4E60), _dec_move_usp),
    (_masked(0xFFC0, 0x4E80), _dec_control("JSR")),
    (_masked(0xFFC0, 0x4EC0), _dec_control("JMP")),
    (lambda f: f.opmode == 7, _dec_lea),
    (lambda f: f.opmode == 6, _dec_chk),
    (lambda f: not f.bit8 and f.rx in UNARY_OPS and f.size < 3, _dec_unary),
    (lambda f: f.rx == 0 and f.size == 3, _dec_move_from_sr),
    (lambda f: f.rx == 1 and f.size == 3, _dec_move_from_ccr),
    (lambda f: f.rx == 2 and f.size == 3, _dec_move_to_ccr),
    (lambda f: f.rx == 3 and f.size == 3, _dec_move_to_sr),
    (lambda f: f.rx == 4 and f.opmode == 0, _dec_nbcd),
    (lambda f: f.rx == 4 and f.opmode == 1 and f.mode == 0, _dec_swap),
    (lambda f: f.rx == 4 and f.opmode == 1, _dec_pea),
    (lambda f: f.rx == 4 and f.opmode in (2, 3) and f.mode == 0, _dec_ext),
    (lambda f: f.rx == 5 and f.size == 3, _dec_tas),
    (lambda f: f.rx in (4, 6) and f.opmode in (2, 3), _dec_movem),
)


# ---------------------------------------------------------------------------
# 0101 ADDQ/SUBQ/Scc/DBcc


def _dec_dbcc(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    start = ctx.bytes_consumed()
    disp = ctx.read_s16()
    ctx.record_operand("disp", "disp16", start=start)
    return _instr(
        f, ctx, "DB" + condition_name(f.cond), None, DataReg(f.reg), BranchDisp(disp)
    )


def _dec_scc(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "S" + condition_name(f.cond), None, _ea(f, ctx, Size.BYTE))


def _dec_quick(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    data = f.rx or 8
    mnemonic = "SUBQ" if f.bit8 else "ADDQ"
    return _instr(f, ctx, mnemonic, f.size, Quick(data), _ea(f, ctx, f.size))


GROUP_5: Tuple[Rule, ...] = (
    (lambda f: f.size == 3 and f.mode == 1, _dec_dbcc),
    (lambda f: f.size == 3, _dec_scc),
    (lambda f: True, _dec_quick),
)


# ---------------------------------------------------------------------------
# 0110 Bcc/BSR/BRA


def _dec_branch(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    disp = f.word & 0xFF
    if disp == 0:
        start = ctx.bytes_consumed()
        disp = ctx.read_s16()
        ctx.record_operand("disp", "disp16", start=start)
    else:
        disp = sign_extend(disp, 8)

    if f.cond == 0:
        mnemonic = "BRA"
    elif f.cond == 1:
        mnemonic = "BSR"
    else:
        mnemonic = "B" + condition_name(f.cond)
    return _instr(f, ctx, mnemonic, None, BranchDisp(disp))


GROUP_6: Tuple[Rule, ...] = ((lambda f: True, _dec_branch),)


# ---------------------------------------------------------------------------
# 0111 MOVEQ


def _dec_moveq(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(
        f, ctx, "MOVEQ", None, Quick(sign_extend(f.word & 0xFF, 8)), DataReg(f.rx)
    )


GROUP_7: Tuple[Rule, ...] = ((lambda f: not f.bit8, _dec_moveq),)


# ---------------------------------------------------------------------------
# Shared shapes of groups 8, 9, 11, 12 and 13


def _dec_ea_to_dn(mnemonic: str, size: Optional[int] = None) -> DecoderFunc:
    """`<ea>,Dn`; a fixed `size` forces the operation width (MUL/DIV)."""

    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        op_size = f.size if size is None else size
        return _instr(f, ctx, mnemonic, op_size, _ea(f, ctx, op_size, "src"), DataReg(f.rx))

    return decode


def _dec_dn_to_ea(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        return _instr(f, ctx, mnemonic, f.size, DataReg(f.rx), _ea(f, ctx, f.size, "dst"))

    return decode


def _dec_general(mnemonic: str) -> DecoderFunc:
    """Direction bit 8 clear is `<ea>,Dn`, set is `Dn,<ea>`."""
    to_dn = _dec_ea_to_dn(mnemonic)
    to_ea = _dec_dn_to_ea(mnemonic)

    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        return to_ea(f, ctx) if f.bit8 else to_dn(f, ctx)

    return decode


def _dec_ea_to_an(mnemonic: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        size = Size.LONG if f.bit8 else Size.WORD
        return _instr(f, ctx, mnemonic, size, _ea(f, ctx, size, "src"), AddrReg(f.rx))

    return decode


def _dec_reg_or_predec(mnemonic: str, sized: bool) -> DecoderFunc:
    """ABCD/SBCD/ADDX/SUBX: `Dy,Dx` (mode 0) or `-(Ay),-(Ax)` (mode 1)."""

    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        size = f.size if sized else None
        if f.mode == 0:
            return _instr(f, ctx, mnemonic, size, DataReg(f.reg), DataReg(f.rx))
        return _instr(f, ctx, mnemonic, size, PreDecrement(f.reg), PreDecrement(f.rx))

    return decode


def _is_reg_or_predec(f: Fields) -> bool:
    return f.mode in (0, 1)


# ---------------------------------------------------------------------------
# 1000 OR/DIV/SBCD

GROUP_8: Tuple[Rule, ...] = (
    (lambda f: f.opmode == 3, _dec_ea_to_dn("DIVU", Size.WORD)),
    (lambda f: f.opmode == 7, _dec_ea_to_dn("DIVS", Size.WORD)),
    (lambda f: f.opmode == 4 and _is_reg_or_predec(f), _dec_reg_or_predec("SBCD", False)),
    (lambda f: True, _dec_general("OR")),
)


# ---------------------------------------------------------------------------
# 1001 SUB/SUBX / 1101 ADD/ADDX


def _arith_group(name: str) -> Tuple[Rule, ...]:
    return (
        (lambda f: f.size == 3, _dec_ea_to_an(name + "A")),
        (
            lambda f: f.opmode >= 4 and _is_reg_or_predec(f),
            _dec_reg_or_predec(name + "X", True),
        ),
        (lambda f: True, _dec_general(name)),
    )


GROUP_9 = _arith_group("SUB")
GROUP_13 = _arith_group("ADD")


# ---------------------------------------------------------------------------
# 1011 CMP/EOR


def _dec_cmpm(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    return _instr(f, ctx, "CMPM", f.size, PostIncrement(f.reg), PostIncrement(f.rx))


GROUP_11: Tuple[Rule, ...] = (
    (lambda f: f.size == 3, _dec_ea_to_an("CMPA")),
    (lambda f: f.opmode < 3, _dec_ea_to_dn("CMP")),
    (lambda f: f.mode == 1, _dec_cmpm),
    (lambda f: True, _dec_dn_to_ea("EOR")),
)


# ---------------------------------------------------------------------------
# 1100 AND/MUL/ABCD/EXG


def _dec_exg(kind: str) -> DecoderFunc:
    def decode(f: Fields, ctx: StreamCtx) -> DecodedInstr:
        if kind == "data":
            regs: Tuple[Operand, Operand] = (DataReg(f.rx), DataReg(f.reg))
        elif kind == "addr":
            regs = (AddrReg(f.rx), AddrReg(f.reg))
        else:
            regs = (DataReg(f.rx), AddrReg(f.reg))
        return _instr(f, ctx, "EXG", None, *regs)

    return decode


GROUP_12: Tuple[Rule, ...] = (
    (lambda f: f.opmode == 3, _dec_ea_to_dn("MULU", Size.WORD)),
    (lambda f: f.opmode == 7, _dec_ea_to_dn("MULS", Size.WORD)),
    (lambda f: f.opmode == 4 and _is_reg_or_predec(f), _dec_reg_or_predec("ABCD", False)),
    (lambda f: f.opmode == 5 and f.mode == 0, _dec_exg("data")),
    (lambda f: f.opmode == 5 and f.mode == 1, _dec_exg("addr")),
    (lambda f: f.opmode == 6 and f.mode == 1, _dec_exg("mixed")),
    (lambda f: True, _dec_general("AND")),
)


# ---------------------------------------------------------------------------
# 1110 Shift/Rotate


def _shift_name(kind: int, left: int) -> str:
    return SHIFT_OPS[kind] + ("L" if left else "R")


def _dec_shift_memory(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    # Memory shifts always operate on a word by one bit.
    return _instr(f, ctx, _shift_name(f.rx & 0x03, f.bit8), None, _ea(f, ctx, Size.WORD))


def _dec_shift_register(f: Fields, ctx: StreamCtx) -> DecodedInstr:
    kind = (f.word >> 3) & 0x03
    count: Operand
    if f.word & 0x20:
        count = DataReg(f.rx)
    else:
        count = Quick(f.rx or 8)
    return _instr(f, ctx, _shift_name(kind, f.bit8), f.size, count, DataReg(f.reg))


GROUP_14: Tuple[Rule, ...] = (
    (lambda f: f.size == 3 and f.rx < 4, _dec_shift_memory),
    (lambda f: f.size < 3, _dec_shift_register),
)


# ---------------------------------------------------------------------------
# 1010 and 1111 are unassigned on the 68000.

GROUPS: Dict[int, Tuple[Rule, ...]] = {
    0x0: GROUP_0,
    0x1: GROUP_MOVE,
    0x2: GROUP_MOVE,
    0x3: GROUP_MOVE,
    0x4: GROUP_4,
    0x5: GROUP_5,
    0x6: GROUP_6,
    0x7: GROUP_7,
    0x8: GROUP_8,
    0x9: GROUP_9,
    0xA: (),
    0xB: GROUP_11,
    0xC: GROUP_12,
    0xD: GROUP_13,
    0xE: GROUP_14,
    0xF: (),
}


def decode_opcode(word: int, ctx: StreamCtx) -> DecodedInstr:
    """Decode `word`, whose instruction word `ctx` has already consumed."""
    f = Fields(word)
    for predicate, decoder in GROUPS[f.group]:
        if predicate(f):
            return decoder(f, ctx)
    raise UnknownInstruction(f"Unknown instruction {word:#06x} at {ctx.pc:#x}")


def decode_at(ctx: StreamCtx) -> DecodedInstr:
    """Fetch the instruction word at the cursor and decode it."""
    word = ctx.read_u16()
    return decode_opcode(word, ctx)
