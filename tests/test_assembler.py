import pytest

from turbinevm.assembler import Assembler
from turbinevm.bytecode import ImmediateRegister, RefMark
from turbinevm.instruction import Opcode, decode_instruction


@pytest.fixture
def asm():
    a = Assembler()
    a.init_registers(4)
    return a


def test_move_encodes_registers_and_marks_value(asm):
    dst = asm.emit_move(1, 2)
    assert dst == 1
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.MOVE
    assert (inst.a, inst.b) == (1, 2)
    assert asm.stack_marks == [RefMark(0, 1, False)]


def test_move_to_same_register_emits_nothing(asm):
    assert asm.emit_move(3, 3) == 3
    assert asm.emit_move_ref(3, 3) == 3
    assert asm.size == 0
    assert asm.stack_marks == []


def test_move_ref_marks_reference(asm):
    asm.emit_move_ref(1, 2)
    assert asm.stack_marks == [RefMark(0, 1, True)]
    assert decode_instruction(asm.read(0)).op is Opcode.MOVE


def test_load_global_with_smallint_operand(asm):
    src = asm.load_int(7)
    asm.emit_load_global(2, src)
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.LOADGLOBAL
    assert inst.b == src
    assert asm.size == 1
    assert asm.stack_marks == [RefMark(0, 2, False)]


def test_store_global_leaves_no_marks(asm):
    dst = asm.load_int(3)
    asm.emit_store_global(dst, 1)
    assert decode_instruction(asm.read(0)).op is Opcode.STOREGLOBAL
    assert asm.stack_marks == []
    assert asm.global_refs == {}


def test_store_global_ref_marks_global(asm):
    dst = asm.load_int(3)
    asm.emit_store_global_ref(dst, 1)
    assert asm.global_refs == {3: True}
    assert asm.stack_marks == []


def test_int32_immediate_follows_instruction(asm):
    idx = asm.load_int(100000)
    assert idx == ImmediateRegister.INT32
    asm.emit_load_vec(1, 2, idx)
    assert asm.size == 2
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.LOADVEC
    assert inst.c == idx
    value, used = asm.read_immediate_value(1, idx)
    assert (value, used) == (100000, 1)


def test_immediates_are_written_in_operand_order(asm):
    b = asm.load_int(-5)
    c = asm.load_string("hi")
    asm.emit_add_int(1, b, c)
    assert asm.size == 3
    assert asm.read(1) == -5
    assert asm.const_pool.get_string(asm.read(2)) == "hi"
    assert asm.read_immediate_value(2, c) == ("hi", 1)


def test_float_immediate_round_trip(asm):
    f = asm.load_float(2.5)
    asm.emit_mul_float(1, 2, f)
    assert asm.read_immediate_value(1, f) == (2.5, 1)


def test_store_vec_puts_immediate_after_word(asm):
    idx = asm.load_int(-1)
    asm.emit_store_vec(1, idx, 2)
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.STOREVEC
    assert (inst.a, inst.b, inst.c) == (1, idx, 2)
    assert asm.read(1) == -1
    assert asm.stack_marks == []


@pytest.mark.parametrize(
    "name, op, is_ref",
    [
        ("emit_load_vec", Opcode.LOADVEC, False),
        ("emit_load_vec_ref", Opcode.LOADVEC, True),
        ("emit_load_map", Opcode.LOADMAP, False),
        ("emit_load_map_ref", Opcode.LOADMAP, True),
        ("emit_load_struct", Opcode.LOADSTRUCT, False),
        ("emit_load_struct_ref", Opcode.LOADSTRUCT, True),
        ("emit_load_enum", Opcode.LOADENUM, False),
        ("emit_new_vec", Opcode.NEWVEC, True),
        ("emit_new_map", Opcode.NEWMAP, True),
        ("emit_new_set", Opcode.NEWSET, True),
        ("emit_new_stack", Opcode.NEWSTACK, True),
        ("emit_new_queue", Opcode.NEWQUEUE, True),
        ("emit_add_int", Opcode.ADDINT, False),
        ("emit_add_float", Opcode.ADDFLOAT, False),
        ("emit_sub_int", Opcode.SUBINT, False),
        ("emit_sub_float", Opcode.SUBFLOAT, False),
        ("emit_mul_int", Opcode.MULINT, False),
        ("emit_mul_float", Opcode.MULFLOAT, False),
        ("emit_div_int", Opcode.DIVINT, False),
        ("emit_div_float", Opcode.DIVFLOAT, False),
        ("emit_rem_int", Opcode.REMINT, False),
        ("emit_rem_float", Opcode.REMFLOAT, False),
        ("emit_equal_int", Opcode.EQINT, False),
        ("emit_equal_float", Opcode.EQFLOAT, False),
        ("emit_not_equal_int", Opcode.NEQINT, False),
        ("emit_not_equal_float", Opcode.NEQFLOAT, False),
        ("emit_less_int", Opcode.LTINT, False),
        ("emit_less_float", Opcode.LTFLOAT, False),
        ("emit_less_equal_int", Opcode.LTEINT, False),
        ("emit_less_equal_float", Opcode.LTEFLOAT, False),
        ("emit_greater_int", Opcode.GTINT, False),
        ("emit_greater_float", Opcode.GTFLOAT, False),
        ("emit_greater_equal_int", Opcode.GTEINT, False),
        ("emit_greater_equal_float", Opcode.GTEFLOAT, False),
        ("emit_bitwise_and", Opcode.BITWISEAND, False),
        ("emit_bitwise_or", Opcode.BITWISEOR, False),
        ("emit_bitwise_xor", Opcode.BITWISEXOR, False),
        ("emit_shift_left", Opcode.SHL, False),
        ("emit_shift_right", Opcode.SHR, False),
        ("emit_concat_string", Opcode.CATSTRING, True),
        ("emit_equal_string", Opcode.EQSTRING, False),
        ("emit_not_equal_string", Opcode.NEQSTRING, False),
    ],
)
def test_three_operand_emitters(asm, name, op, is_ref):
    dst = getattr(asm, name)(4, 5, 6)
    assert dst == 4
    inst = decode_instruction(asm.read(0))
    assert inst.op is op
    assert (inst.a, inst.b, inst.c) == (4, 5, 6)
    assert asm.stack_marks == [RefMark(0, 4, is_ref)]


@pytest.mark.parametrize(
    "name, op",
    [
        ("emit_store_vec", Opcode.STOREVEC),
        ("emit_store_map", Opcode.STOREMAP),
        ("emit_store_struct", Opcode.STORESTRUCT),
    ],
)
def test_store_emitters_leave_no_marks(asm, name, op):
    assert getattr(asm, name)(4, 5, 6) == 4
    inst = decode_instruction(asm.read(0))
    assert inst.op is op
    assert (inst.a, inst.b, inst.c) == (4, 5, 6)
    assert asm.stack_marks == []


@pytest.mark.parametrize(
    "name, op",
    [
        ("emit_bitwise_not", Opcode.BITWISENOT),
        ("emit_negate_int", Opcode.NEGINT),
        ("emit_negate_float", Opcode.NEGFLOAT),
        ("emit_set_if_zero", Opcode.SETIFZERO),
        ("emit_set_if_not_zero", Opcode.SETIFNOTZ),
    ],
)
def test_two_operand_emitters(asm, name, op):
    assert getattr(asm, name)(4, 5) == 4
    inst = decode_instruction(asm.read(0))
    assert inst.op is op
    assert (inst.a, inst.b) == (4, 5)
    assert asm.stack_marks == [RefMark(0, 4, False)]


def test_new_struct_uses_wide_operand(asm):
    struct_id = asm.register_struct("main:Point", 2)
    asm.emit_new_struct(4, struct_id)
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.NEWSTRUCT
    assert (inst.a, inst.bb) == (4, struct_id)
    assert asm.stack_marks == [RefMark(0, 4, True)]


def test_emit_binary_accepts_three_operand_opcode(asm):
    asm.emit_binary(Opcode.SUBINT, 4, 5, 6)
    inst = decode_instruction(asm.read(0))
    assert inst.op is Opcode.SUBINT
    assert (inst.a, inst.b, inst.c) == (4, 5, 6)


@pytest.mark.parametrize("op", [Opcode.MOVE, Opcode.NEWSTRUCT, Opcode.HALT])
def test_emit_binary_rejects_other_formats(asm, op):
    with pytest.raises(ValueError):
        asm.emit_binary(op, 4, 5, 6)
    assert asm.size == 0


def test_marks_record_addresses_in_sequence(asm):
    asm.emit_move(1, 2)
    big = asm.load_int(100000)
    asm.emit_add_int(3, big, 2)
    asm.emit_concat_string(4, 1, 3)
    assert [m.addr for m in asm.stack_marks] == [0, 1, 3]
    assert [m.slot for m in asm.stack_marks] == [1, 3, 4]


def test_temporary_register_as_destination(asm):
    tmp = asm.allocate_temporary_register()
    assert asm.is_temporary_register(tmp)
    assert asm.emit_add_int(tmp, 0, 1) == tmp
    assert decode_instruction(asm.read(0)).a == tmp