"""Emitters for data movement, collection, arithmetic and string instructions."""

from __future__ import annotations

from .bytecode import Bytecode
from .instruction import Opcode, OperandFormat, lookup_opcode_info


class Assembler(Bytecode):
    """Bytecode that can emit register instructions.

    Every emitter that writes a register records whether that register holds
    a reference afterwards. Each emitter returns the destination register.
    """

    # helpers
    def _emit_ab(self, op: Opcode, dst: int, src: int, is_ref: bool | None) -> int:
        if is_ref is not None:
            self._mark_ref(dst, is_ref)
        self._push_ab(op, dst, src)
        return dst

    def _emit_abc(
        self, op: Opcode, dst: int, src0: int, src1: int, is_ref: bool | None
    ) -> int:
        if is_ref is not None:
            self._mark_ref(dst, is_ref)
        self._push_abc(op, dst, src0, src1)
        return dst

    # load, store, move
    def emit_move(self, dst: int, src: int) -> int:
        """Copy a value register; nothing is emitted when dst is src."""
        if dst == src:
            return dst
        return self._emit_ab(Opcode.MOVE, dst, src, False)

    def emit_move_ref(self, dst: int, src: int) -> int:
        """Copy a reference register; nothing is emitted when dst is src."""
        if dst == src:
            return dst
        return self._emit_ab(Opcode.MOVE, dst, src, True)

    def emit_load_global(self, dst: int, src: int) -> int:
        # globals are traced separately, so the local slot is never a reference
        return self._emit_ab(Opcode.LOADGLOBAL, dst, src, False)

    def emit_store_global(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.STOREGLOBAL, dst, src, None)

    def emit_store_global_ref(self, dst: int, src: int) -> int:
        """Store to a global and mark that global as holding a reference."""
        self._mark_global_ref(dst, True)
        return self._emit_ab(Opcode.STOREGLOBAL, dst, src, None)

    def emit_load_vec(self, dst: int, src: int, idx: int) -> int:
        return self._emit_abc(Opcode.LOADVEC, dst, src, idx, False)

    def emit_load_vec_ref(self, dst: int, src: int, idx: int) -> int:
        return self._emit_abc(Opcode.LOADVEC, dst, src, idx, True)

    def emit_store_vec(self, dst: int, idx: int, src: int) -> int:
        return self._emit_abc(Opcode.STOREVEC, dst, idx, src, None)

    def emit_load_map(self, dst: int, src: int, key: int) -> int:
        return self._emit_abc(Opcode.LOADMAP, dst, src, key, False)

    def emit_load_map_ref(self, dst: int, src: int, key: int) -> int:
        return self._emit_abc(Opcode.LOADMAP, dst, src, key, True)

    def emit_store_map(self, dst: int, key: int, src: int) -> int:
        return self._emit_abc(Opcode.STOREMAP, dst, key, src, None)

    def emit_load_struct(self, dst: int, src: int, field_index: int) -> int:
        return self._emit_abc(Opcode.LOADSTRUCT, dst, src, field_index, False)

    def emit_load_struct_ref(self, dst: int, src: int, field_index: int) -> int:
        return self._emit_abc(Opcode.LOADSTRUCT, dst, src, field_index, True)

    def emit_store_struct(self, dst: int, field_index: int, src: int) -> int:
        return self._emit_abc(Opcode.STORESTRUCT, dst, field_index, src, None)

    def emit_load_enum(self, dst: int, src: int, field_offset: int) -> int:
        return self._emit_abc(Opcode.LOADENUM, dst, src, field_offset, False)

    # vec, map, set, stack, queue, struct
    def emit_new_vec(self, dst: int, value_type: int, length: int) -> int:
        return self._emit_abc(Opcode.NEWVEC, dst, value_type, length, True)

    def emit_new_map(self, dst: int, value_type: int, length: int) -> int:
        return self._emit_abc(Opcode.NEWMAP, dst, value_type, length, True)

    def emit_new_set(self, dst: int, value_type: int, length: int) -> int:
        return self._emit_abc(Opcode.NEWSET, dst, value_type, length, True)

    def emit_new_stack(self, dst: int, value_type: int, length: int) -> int:
        return self._emit_abc(Opcode.NEWSTACK, dst, value_type, length, True)

    def emit_new_queue(self, dst: int, value_type: int, length: int) -> int:
        return self._emit_abc(Opcode.NEWQUEUE, dst, value_type, length, True)

    def emit_new_struct(self, dst: int, struct_id: int) -> int:
        self._mark_ref(dst, True)
        self._push_abb(Opcode.NEWSTRUCT, dst, struct_id)
        return dst

    # arithmetic
    def emit_binary(self, op: Opcode, dst: int, src0: int, src1: int) -> int:
        """Emit a three-register instruction whose result is not a reference."""
        if lookup_opcode_info(op).operand is not OperandFormat.ABC:
            raise ValueError(f"opcode {Opcode(op).name} does not take three operands")
        return self._emit_abc(Opcode(op), dst, src0, src1, False)

    def emit_add_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.ADDINT, dst, src0, src1)

    def emit_add_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.ADDFLOAT, dst, src0, src1)

    def emit_sub_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.SUBINT, dst, src0, src1)

    def emit_sub_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.SUBFLOAT, dst, src0, src1)

    def emit_mul_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.MULINT, dst, src0, src1)

    def emit_mul_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.MULFLOAT, dst, src0, src1)

    def emit_div_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.DIVINT, dst, src0, src1)

    def emit_div_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.DIVFLOAT, dst, src0, src1)

    def emit_rem_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.REMINT, dst, src0, src1)

    def emit_rem_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.REMFLOAT, dst, src0, src1)

    def emit_equal_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.EQINT, dst, src0, src1)

    def emit_equal_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.EQFLOAT, dst, src0, src1)

    def emit_not_equal_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.NEQINT, dst, src0, src1)

    def emit_not_equal_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.NEQFLOAT, dst, src0, src1)

    def emit_less_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.LTINT, dst, src0, src1)

    def emit_less_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.LTFLOAT, dst, src0, src1)

    def emit_less_equal_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.LTEINT, dst, src0, src1)

    def emit_less_equal_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.LTEFLOAT, dst, src0, src1)

    def emit_greater_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.GTINT, dst, src0, src1)

    def emit_greater_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.GTFLOAT, dst, src0, src1)

    def emit_greater_equal_int(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.GTEINT, dst, src0, src1)

    def emit_greater_equal_float(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.GTEFLOAT, dst, src0, src1)

    def emit_bitwise_and(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.BITWISEAND, dst, src0, src1)

    def emit_bitwise_or(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.BITWISEOR, dst, src0, src1)

    def emit_bitwise_xor(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.BITWISEXOR, dst, src0, src1)

    def emit_bitwise_not(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.BITWISENOT, dst, src, False)

    def emit_shift_left(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.SHL, dst, src0, src1)

    def emit_shift_right(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.SHR, dst, src0, src1)

    def emit_negate_int(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.NEGINT, dst, src, False)

    def emit_negate_float(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.NEGFLOAT, dst, src, False)

    def emit_set_if_zero(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.SETIFZERO, dst, src, False)

    def emit_set_if_not_zero(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.SETIFNOTZ, dst, src, False)

    # string
    def emit_concat_string(self, dst: int, src0: int, src1: int) -> int:
        return self._emit_abc(Opcode.CATSTRING, dst, src0, src1, True)

    def emit_equal_string(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.EQSTRING, dst, src0, src1)

    def emit_not_equal_string(self, dst: int, src0: int, src1: int) -> int:
        return self.emit_binary(Opcode.NEQSTRING, dst, src0, src1)