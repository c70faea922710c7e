"""
Test Configuration
==================

pytest fixtures shared by the stackcc test suite.

It provides:
- run_asm: executes a generated listing on a minimal model of the x86-64
  instructions the code generator uses, and returns the value in RAX

The model covers push, pop, mov, add, sub, imul, cqo, idiv and ret with
64-bit two's complement wraparound and truncating signed division, which
is enough to check what a listing computes without an assembler.
"""

import pytest


MASK64 = (1 << 64) - 1


def _wrap64(value: int) -> int:
    """Reduce a Python int to a signed 64-bit value."""
    value &= MASK64
    return value - (1 << 64) if value >> 63 else value


def execute_listing(listing: str) -> int:
    """
    Run an assembly listing and return RAX at ``ret``.

    Raises:
        ZeroDivisionError: On idiv by zero (the hardware would trap)
        AssertionError: If the stack is not balanced at ``ret``
        ValueError: On an instruction outside the modelled subset
    """
    regs = {"rax": 0, "rdi": 0, "rdx": 0}
    stack: list[int] = []

    def operand(text: str) -> int:
        return regs[text] if text in regs else int(text)

    for raw in listing.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line or line.startswith(".") or line.endswith(":"):
            continue

        mnemonic, _, rest = line.partition(" ")
        args = [a.strip() for a in rest.split(",")] if rest else []

        if mnemonic == "push":
            stack.append(_wrap64(operand(args[0])))
        elif mnemonic == "pop":
            regs[args[0]] = stack.pop()
        elif mnemonic == "mov":
            regs[args[0]] = _wrap64(operand(args[1]))
        elif mnemonic == "add":
            regs[args[0]] = _wrap64(regs[args[0]] + operand(args[1]))
        elif mnemonic == "sub":
            regs[args[0]] = _wrap64(regs[args[0]] - operand(args[1]))
        elif mnemonic == "imul":
            regs[args[0]] = _wrap64(regs[args[0]] * operand(args[1]))
        elif mnemonic == "cqo":
            regs["rdx"] = -1 if regs["rax"] < 0 else 0
        elif mnemonic == "idiv":
            divisor = operand(args[0])
            if divisor == 0:
                raise ZeroDivisionError("idiv by zero")
            dividend = (regs["rdx"] << 64) | (regs["rax"] & MASK64)
            quotient = abs(dividend) // abs(divisor)
            if (dividend < 0) != (divisor < 0):
                quotient = -quotient
            regs["rax"] = _wrap64(quotient)
            regs["rdx"] = _wrap64(dividend - quotient * divisor)
        elif mnemonic == "ret":
            assert stack == [], f"stack not balanced at ret: {stack}"
            return regs["rax"]
        else:
            raise ValueError(f"unsupported instruction: {line}")

    raise AssertionError("listing has no ret")


@pytest.fixture
def run_asm():
    """Fixture: function that executes a listing and returns RAX."""
    return execute_listing
