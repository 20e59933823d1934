"""
Moore ↔ Mealy conversion.

Moore machines are learned with the Mealy algorithm: every Mealy transition
carries the output of the Moore state it leaves, so the Mealy output on a
word lists the Moore outputs of the states visited before each input. The
reverse direction reads a state's output off any outgoing transition.
"""

from .errors import InvariantViolation
from .mealy import MealyMachine
from .moore import MooreMachine


def moore_to_mealy(moore: MooreMachine) -> MealyMachine:
    """
    Encode a Moore machine as a Mealy machine with the same states.

    λ(q, a) = output(q) for every state q and symbol a.
    """
    mealy = MealyMachine(moore.alphabet)
    for _ in moore.states:
        mealy.add_state()
    for state in moore.states:
        output = moore.state_output(state)
        for symbol, target in moore.delta[state].items():
            mealy.set_transition(state, symbol, target, output)
    if moore.q0 is not None:
        mealy.set_initial(moore.q0)
    return mealy


def mealy_to_moore(mealy: MealyMachine) -> MooreMachine:
    """
    Decode a Moore-encoded Mealy machine.

    Raises:
        InvariantViolation: If some state emits different outputs on
            different inputs, or has no outgoing transition to read from
    """
    moore = MooreMachine(mealy.alphabet)
    for state in mealy.states:
        outputs = [mealy.outputs[state][a] for a in mealy.alphabet if a in mealy.outputs[state]]
        if not outputs:
            raise InvariantViolation(f"state {state} has no transition to read its output from")
        if any(o != outputs[0] for o in outputs[1:]):
            raise InvariantViolation(
                f"state {state} emits different outputs {outputs}; not a Moore encoding"
            )
        moore.add_state(outputs[0])
    for state in mealy.states:
        for symbol, target in mealy.delta[state].items():
            moore.set_transition(state, symbol, target)
    if mealy.q0 is not None:
        moore.set_initial(mealy.q0)
    return moore
