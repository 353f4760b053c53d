"""Policy evaluators and a configurable stand-in evaluator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from attest.policy.types import Input, Policy, Result


@runtime_checkable
class Evaluator(Protocol):
    """Evaluates a policy against an image's attestations."""

    def evaluate(self, resolver: Any, policy: Policy, input_: Input) -> Result: ...


EvaluateFunc = Callable[[Any, Policy, Input], Result]


def allowed_result() -> Result:
    """A successful result with no violations."""
    return Result(success=True)


@dataclass
class MockPolicyEvaluator:
    """Evaluator that delegates to ``evaluate_func`` or else allows everything."""

    evaluate_func: Optional[EvaluateFunc] = None

    def evaluate(self, resolver: Any, policy: Policy, input_: Input) -> Result:
        if self.evaluate_func is not None:
            return self.evaluate_func(resolver, policy, input_)
        return allowed_result()


def get_mock_policy() -> Evaluator:
    """An evaluator that always allows."""
    return MockPolicyEvaluator(evaluate_func=lambda _resolver, _policy, _input: allowed_result())