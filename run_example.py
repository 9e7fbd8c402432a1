"""Quick smoke run: build the balanced-parentheses DPDA, feed it a few strings
and print status, verdict and the transition table.
"""
from pprint import pprint
from DeterministicPDA import DeterministicPDA
from PDAErrors import DeterminismViolation
from Transition import EPSILON


def build_balanced():
    pda = DeterministicPDA(1, "()", record_history=True)
    pda.add_final_states([0])
    pda.add_transition(0, 0, '(', '$', 'X$')
    pda.add_transition(0, 0, '(', 'X', 'XX')
    pda.add_transition(0, 0, ')', 'X', EPSILON)
    return pda


def main():
    pda = build_balanced()

    print("Transition table:")
    print(pda.transition_table().to_string(index=False))

    try:
        pda.add_transition(0, 0, '(', EPSILON, 'X')
    except DeterminismViolation as e:
        print(f"Rejected ( . X: {e}")

    for string in ["(())", "(()", ")", "()()"]:
        verdict = pda.process(string)
        print(f"{string!r:8} -> {pda.get_current_status():10} {verdict}")

    print("History of the last run:")
    pprint(pda.history)

    print("Done.")


if __name__ == '__main__':
    main()
