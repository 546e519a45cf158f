"""Emitters for calls, jumps, loops, conversions and program control."""

from __future__ import annotations

from .assembler import Assembler
from .instruction import Opcode


class Emitter(Assembler):
    """Bytecode that can emit the whole instruction set.

    Jump and loop emitters return the address of the instruction whose
    16-bit operand holds the destination, so that it can be back patched.
    """

    # function call
    def _emit_call(self, ret_reg: int, func_id: int, is_native: bool, is_ref: bool) -> int:
        self._mark_ref(ret_reg, is_ref)
        op = Opcode.CALLNATIVE if is_native else Opcode.CALL
        self._push_abb(op, ret_reg, func_id)
        return ret_reg

    def emit_call_function(self, ret_reg: int, func_id: int, is_native: bool) -> int:
        """Call a function by id; the result in ret_reg is not a reference."""
        return self._emit_call(ret_reg, func_id, is_native, False)

    def emit_call_function_ref(self, ret_reg: int, func_id: int, is_native: bool) -> int:
        """Call a function by id; the result in ret_reg is a reference."""
        return self._emit_call(ret_reg, func_id, is_native, True)

    def emit_call_function_pointer(self, ret_reg: int, src: int) -> int:
        """Call the function whose id is held in src."""
        return self._emit_ab(Opcode.CALLPOINTER, ret_reg, src, False)

    def emit_call_function_pointer_ref(self, ret_reg: int, src: int) -> int:
        """Call the function whose id is held in src; the result is a reference."""
        return self._emit_ab(Opcode.CALLPOINTER, ret_reg, src, True)

    def emit_return(self, src: int) -> None:
        """Return the value in src; the result always lands in register 0."""
        self._mark_ref(0, False)
        self._push_a(Opcode.RETURN, src)

    # jump
    def _emit_branch(self, op: Opcode, a: int, addr: int) -> int:
        operand_addr = self.next_addr
        self._push_abb(op, a, addr)
        return operand_addr

    def emit_jump(self, addr: int) -> int:
        return self._emit_branch(Opcode.JUMP, 0, addr)

    def emit_jump_if_zero(self, src: int, addr: int) -> int:
        return self._emit_branch(Opcode.JUMPIFZERO, src, addr)

    def emit_jump_if_not_zero(self, src: int, addr: int) -> int:
        return self._emit_branch(Opcode.JUMPIFNOTZ, src, addr)

    # loop
    # Elements of collections are traced from the collections themselves,
    # so only the collection slot of an iterator is marked as a reference.
    def _emit_loop_begin(self, op: Opcode, itr: int, *is_refs: bool) -> int:
        self._mark_ref(itr, *is_refs)
        return self._emit_branch(op, itr, -1)

    def emit_fornum_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORNUMBEGIN, itr, False, False, False, False)

    def emit_fornum_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORNUMEND, itr, begin)

    def emit_forvec_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORVECBEGIN, itr, False, False, True)

    def emit_forvec_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORVECEND, itr, begin)

    def emit_formap_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORMAPBEGIN, itr, False, False, False, True)

    def emit_formap_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORMAPEND, itr, begin)

    def emit_forset_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORSETBEGIN, itr, False, False, True)

    def emit_forset_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORSETEND, itr, begin)

    def emit_forstack_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORSTACKBEGIN, itr, False, False, True)

    def emit_forstack_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORSTACKEND, itr, begin)

    def emit_forqueue_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORQUEUEBEGIN, itr, False, False, True)

    def emit_forqueue_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORQUEUEEND, itr, begin)

    def emit_forenum_begin(self, itr: int) -> int:
        return self._emit_loop_begin(Opcode.FORENUMBEGIN, itr, False, False)

    def emit_forenum_end(self, itr: int, begin: int) -> int:
        return self._emit_branch(Opcode.FORENUMEND, itr, begin)

    # conversion
    def emit_bool_to_int(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.BOOLTOINT, dst, src, False)

    def emit_bool_to_float(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.BOOLTOFLOAT, dst, src, False)

    def emit_int_to_bool(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.INTTOBOOL, dst, src, False)

    def emit_int_to_float(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.INTTOFLOAT, dst, src, False)

    def emit_float_to_bool(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.FLOATTOBOOL, dst, src, False)

    def emit_float_to_int(self, dst: int, src: int) -> int:
        return self._emit_ab(Opcode.FLOATTOINT, dst, src, False)

    # program control
    def emit_safepoint(self) -> None:
        self._push_op(Opcode.SAFEPOINTPOLL)

    def emit_halt(self) -> None:
        self._push_op(Opcode.HALT)

    def emit_nop(self) -> None:
        self._push_op(Opcode.NOP)