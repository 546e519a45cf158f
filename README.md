# turbinevm

The code side of a compiler for a register-based virtual machine. It encodes
and decodes 32-bit instruction words, keeps a constant pool, builds bytecode
with temporary register allocation and back-patching, records which registers
hold references, and keeps a registry of built-in modules.

## Install

```
pip install .
```

With the test tools:

```
pip install ".[test]"
```

## Modules

- `turbinevm.instruction`: the `Opcode` and `OperandFormat` enums,
  `OpcodeInfo` (mnemonic and operand format) returned by `lookup_opcode_info`,
  the word encoders `encode_op`, `encode_a`, `encode_ab`, `encode_abc` and
  `encode_abb`, and `decode_instruction`, which turns a word into an
  `Instruction` with fields `op`, `a`, `b`, `c` and `bb`. A word is laid out
  as opcode (8 bits), A (8 bits), then either B and C (8 bits each) or the
  16-bit BB.
- `turbinevm.function`: `Function` records in a `FunctionTable`. `add`
  returns the new id; `lookup` returns `None` for an unknown id, indexing
  raises `IndexError`.
- `turbinevm.constant_pool`: `ConstantPool`. `push_int`, `push_float` and
  `push_string` return the index of an equal constant if one is already
  there. Enum literals (`push_literal_int`, `push_literal_float`,
  `push_literal_string`) are always appended and tagged with a `LiteralKind`.
- `turbinevm.bytecode`: `Bytecode` holds the instruction words, the register
  pointer, the immediate value queue, the back-patch stacks, the function
  table, the `StructInfo` list, the enum fields, the global count and the
  reference marks (`stack_marks`, a list of `RefMark`, and `global_refs`).
  `is_smallint_register` and `is_immediate_value` classify register ids;
  `ImmediateRegister` names the reserved ones.
- `turbinevm.assembler`: `Assembler(Bytecode)` emits moves, global, vec, map,
  struct and enum loads and stores, collection and struct construction,
  arithmetic, comparison, bitwise and string instructions. `emit_binary`
  emits any three-operand opcode and raises `ValueError` for others.
- `turbinevm.emitter`: `Emitter(Assembler)` adds calls, returns, jumps,
  `for` loop instructions, conversions and `emit_safepoint`, `emit_halt`,
  `emit_nop`. Jump and loop emitters return the address of the word to patch.
- `turbinevm.modules`: `ModuleRegistry` of `BuiltinModule` entries. `find`
  returns the first module of a name or `None`; `import_module(scope, name)`
  calls the module's `define_module(scope)` and raises `KeyError` for an
  unknown name. The registry starts empty.

## Registers and immediate values

`init_registers(n)` reserves registers `0..n-1` for locals;
`allocate_temporary_register` hands out the next one and raises
`RegisterOverflowError` once register 191 is taken. Register ids from 192 up
are immediate operands: `load_int` returns 192 + value for 0 to 59, otherwise
a reserved id whose value (a 32-bit integer, or a constant pool index for
wider integers) is written after the next instruction word that uses it.
`load_float` and `load_string` work the same way through the constant pool.
`read_immediate_value(addr, reg)` returns the value and the number of words
it occupies.

## Example

```python
from turbinevm.emitter import Emitter
from turbinevm.instruction import Opcode, decode_instruction

code = Emitter()
code.init_registers(2)
dst = code.allocate_temporary_register()
code.emit_add_int(dst, 0, code.load_int(5))
code.emit_halt()
assert decode_instruction(code.read(0)).op == Opcode.ADDINT

# a loop with a forward jump patched afterwards
loop = Emitter()
loop.begin_while()
begin = loop.next_addr
exit_jump = loop.emit_jump_if_zero(0, -1)
loop.emit_nop()
loop.emit_jump(begin)
loop.back_patch_breaks()
loop.back_patch(exit_jump)
assert decode_instruction(loop.read(exit_jump)).bb == loop.next_addr

# a wide integer travels after the instruction word
imm = Emitter()
imm.emit_move(2, imm.load_int(100000))
assert imm.read_immediate_value(1, 255) == (100000, 1)
```

## What it does not do

There is no parser, no code generation from a syntax tree, no virtual
machine to run the bytecode, no built-in functions or modules, and no
command-line tool. The package produces and inspects bytecode only.

## Tests

```
pytest
```