# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the x86-64 stack code generator.
#
# Test coverage includes:
#   - Literal pushes, including values beyond a 32-bit immediate
#   - Operator sequences and operand order
#   - Program framing and entry labels
#   - Comment annotations
#   - Generator reuse and misuse
# =============================================================================

import pytest
from stackcc.codegen import CodeGenerator, generate
from stackcc.parser import parse_source
from stackcc.ast import AddNode, BinaryNode, NumNode
from stackcc.errors import CodeGenError


# =============================================================================
# Helper Functions
# =============================================================================

def gen(source: str) -> list:
    """Helper to parse and generate body lines for an expression."""
    return generate(parse_source(source))


OPERAND_POPS = ["    pop rdi", "    pop rax"]


# =============================================================================
# Literal Tests
# =============================================================================

class TestLiterals:
    """A literal is a single push."""

    def test_small_literal(self):
        assert generate(NumNode(42)) == ["    push 42"]

    def test_zero(self):
        assert gen("0") == ["    push 0"]

    def test_largest_push_immediate(self):
        assert gen("2147483647") == ["    push 2147483647"]

    def test_literal_beyond_push_immediate(self):
        """PUSH cannot take a 64-bit immediate; go through RAX."""
        assert gen("2147483648") == ["    mov rax, 2147483648", "    push rax"]


# =============================================================================
# Operator Tests
# =============================================================================

class TestOperators:
    """Each operator pops both operands, combines, pushes the result."""

    def test_add(self):
        assert gen("2 + 3") == [
            "    push 2",
            "    push 3",
            *OPERAND_POPS,
            "    add rax, rdi",
            "    push rax",
        ]

    def test_sub_keeps_operand_order(self):
        """Left is pushed first, so it is popped second into RAX."""
        assert gen("8 - 3") == [
            "    push 8",
            "    push 3",
            *OPERAND_POPS,
            "    sub rax, rdi",
            "    push rax",
        ]

    def test_mul(self):
        assert gen("6 * 7")[-2:] == ["    imul rax, rdi", "    push rax"]

    def test_div_sign_extends(self):
        assert gen("7 / 2") == [
            "    push 7",
            "    push 2",
            *OPERAND_POPS,
            "    cqo",
            "    idiv rdi",
            "    push rax",
        ]

    def test_post_order(self):
        """Both subtrees are emitted before the parent's operation."""
        lines = gen("2 + 3 * 4")
        assert lines == [
            "    push 2",
            "    push 3",
            "    push 4",
            *OPERAND_POPS,
            "    imul rax, rdi",
            "    push rax",
            *OPERAND_POPS,
            "    add rax, rdi",
            "    push rax",
        ]

    def test_stack_balance(self):
        """Every body leaves exactly one value on the stack."""
        for source in ["1", "1 + 2", "(1 + 2) * (3 - 4) / 5", "2147483648 * 2"]:
            lines = gen(source)
            pushes = sum(1 for line in lines if line.startswith("    push"))
            pops = sum(1 for line in lines if line.startswith("    pop"))
            assert pushes - pops == 1

    def test_division_by_zero_not_checked(self):
        """Division by zero is the runtime's problem."""
        assert "    idiv rdi" in gen("1 / 0")


# =============================================================================
# Program Framing Tests
# =============================================================================

class TestProgramFraming:
    """generate_program() wraps the body in a callable routine."""

    def test_literal_program(self):
        listing = CodeGenerator().generate_program(NumNode(42))
        assert listing == (
            ".intel_syntax noprefix\n"
            ".globl main\n"
            "main:\n"
            "    push 42\n"
            "    pop rax\n"
            "    ret\n"
        )

    def test_body_between_label_and_return(self):
        tree = parse_source("1 + 2")
        lines = CodeGenerator().generate_program(tree).splitlines()
        assert lines[3:-2] == generate(tree)
        assert lines[-2:] == ["    pop rax", "    ret"]

    def test_frame_existing_body(self):
        generator = CodeGenerator()
        tree = parse_source("4 / 2")
        assert generator.frame_program(generator.generate(tree)) == generator.generate_program(tree)

    def test_custom_entry_label(self):
        listing = CodeGenerator(entry_label="_main").generate_program(NumNode(1))
        assert ".globl _main\n_main:\n" in listing

    def test_invalid_entry_label(self):
        for label in ["", "1abc", "foo bar", "main:"]:
            with pytest.raises(ValueError):
                CodeGenerator(entry_label=label)


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Optional annotations name the sub-expression being computed."""

    def test_comment_before_operand_pops(self):
        lines = CodeGenerator(comments=True).generate(parse_source("1+2"))
        assert lines == [
            "    push 1",
            "    push 2",
            "    # (1 + 2)",
            *OPERAND_POPS,
            "    add rax, rdi",
            "    push rax",
        ]

    def test_one_comment_per_operator(self):
        lines = CodeGenerator(comments=True).generate(parse_source("(1 + 2) * 3"))
        comments = [line for line in lines if line.lstrip().startswith("#")]
        assert comments == ["    # (1 + 2)", "    # ((1 + 2) * 3)"]

    def test_no_comments_by_default(self):
        assert not any("#" in line for line in gen("(1 + 2) * 3"))


# =============================================================================
# Generator Behaviour Tests
# =============================================================================

class TestGenerator:
    """Reuse and misuse of a CodeGenerator."""

    def test_generator_reuse(self):
        """Output from an earlier call is not touched by a later one."""
        generator = CodeGenerator()
        first = generator.generate(parse_source("1 + 2"))
        snapshot = list(first)
        second = generator.generate(parse_source("3"))
        assert first == snapshot
        assert second == ["    push 3"]

    def test_deterministic(self):
        tree = parse_source("(8 - 3) * 2 / 5")
        assert generate(tree) == generate(tree)

    def test_rejects_non_node(self):
        with pytest.raises(CodeGenError):
            generate("1 + 2")

    def test_rejects_abstract_operator(self):
        """BinaryNode itself has no instruction."""
        with pytest.raises(CodeGenError):
            generate(BinaryNode(NumNode(1), NumNode(2)))

    def test_rejects_bad_child(self):
        with pytest.raises(CodeGenError):
            generate(AddNode(NumNode(1), BinaryNode(NumNode(2), NumNode(3))))
