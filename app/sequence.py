from typing import List


def generate(divisor1: int, divisor2: int, limit: int, label1: str, label2: str) -> List[str]:
    """Return the FizzBuzz-style sequence for ``1..limit``.

    Multiples of both divisors become ``label1 + label2``, multiples of
    only one divisor become that divisor's label, and every other
    number is written in decimal.
    """
    if divisor1 <= 0 or divisor2 <= 0 or limit <= 0:
        raise ValueError("divisor1, divisor2 and limit must be positive integers")

    result: List[str] = []
    for i in range(1, limit + 1):
        by_first = i % divisor1 == 0
        by_second = i % divisor2 == 0
        if by_first and by_second:
            result.append(label1 + label2)
        elif by_first:
            result.append(label1)
        elif by_second:
            result.append(label2)
        else:
            result.append(str(i))
    return result
