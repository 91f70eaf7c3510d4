import pytest

from gestures import (
    GestureClassifier,
    GestureGrammar,
    GrammarError,
    LandmarkHistory,
    get_grammar,
    load_grammar,
    NONE,
    FIST,
)


CUSTOM_GRAMMAR = """
name: party
hold_frames: 5
two_hand:
  - symbol: clap
    fingers: ["1111", "1111"]
    checks:
      - {name: tips_close, finger: middle, max_distance: 0.2}
one_hand:
  - symbol: peace
    fingers: "1100"
    checks:
      - {name: tips_apart, first: index, second: middle, min_distance: 0.06}
  - {symbol: point, fingers: "1xxx"}
  - {symbol: fist, fingers: "0000"}
text:
  peace: PEACE
  point: THERE
  clap: CLAP CLAP
"""


def test_builtin_signs_vocabulary():
    signs = get_grammar('signs')
    assert signs.hold_frames == 10
    assert not signs.spelling
    assert signs.symbols[0] == "nice_to_meet"
    assert signs.display_text("nadim") == "THIS IS NADIM"
    assert signs.display_text("nice_to_meet") == "NICE TO MEET YOU"
    assert signs.display_text(FIST) is None
    assert signs.display_text(NONE) is None


def test_builtin_letters_vocabulary():
    letters = get_grammar('letters')
    assert letters.spelling
    assert letters.hold_frames == 8
    assert letters.is_letter("A")
    assert not letters.is_letter(FIST)
    assert not letters.is_letter(NONE)
    assert FIST in letters.symbols


def test_signs_text_is_not_letters():
    assert not get_grammar('signs').is_letter("hello")


def test_unknown_mode():
    with pytest.raises(GrammarError):
        get_grammar('klingon')


def test_load_yaml_grammar(tmp_path, make_hand):
    path = tmp_path / "party.yaml"
    path.write_text(CUSTOM_GRAMMAR)

    grammar = load_grammar(path)
    assert grammar.name == "party"
    assert grammar.hold_frames == 5
    assert grammar.symbols == ["clap", "peace", "point", FIST, NONE]

    classifier = GestureClassifier(grammar)
    assert classifier.classify([make_hand("1100", spread=0.02)]) == "peace"
    assert classifier.classify([make_hand("1011")]) == "point"
    assert classifier.classify([make_hand("0110")]) == NONE


def test_grammar_file_overrides_mode(tmp_path):
    path = tmp_path / "custom.yaml"
    path.write_text("one_hand:\n  - {symbol: wave, fingers: '1111'}\n")
    grammar = get_grammar('letters', grammar_file=path)
    assert grammar.name == "custom"
    assert grammar.symbols == ["wave", NONE]


def test_empty_file_rejected(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    with pytest.raises(GrammarError):
        load_grammar(path)


@pytest.mark.parametrize("data", [
    [],
    {'name': 'empty'},
    {'one_hand': [{'fingers': '1000'}]},
    {'one_hand': [{'symbol': 'x', 'fingers': '10'}]},
    {'one_hand': [{'symbol': 'x', 'fingers': '1002'}]},
    {'one_hand': [{'symbol': 'x', 'checks': ['no_such_check']}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'pinch', 'bogus': 1}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [42]}]},
    {'one_hand': [{'symbol': 'x', 'checks': ['tips_close']}]},
    {'two_hand': [{'symbol': 'x', 'fingers': ['1000']}]},
    {'one_hand': [{'symbol': 'x'}], 'hold_frames': 0},
    {'one_hand': [{'symbol': 'x', 'thumb': 'no'}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'pinch', 'finger': 'thumbz'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'horizontal', 'finger': 'thumb'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'tips_apart', 'second': 'toe'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'z_stroke', 'point': 'elbow'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'moving', 'direction': 'sideways'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'oscillating', 'axis': 'z'}]}]},
    {'one_hand': [{'symbol': 'x', 'checks': [{'name': 'pointing_down', 'finger': ['index']}]}]},
    {'two_hand': [{'symbol': 'x', 'checks': [{'name': 'tips_close', 'finger': 'palm'}]}]},
])
def test_malformed_grammars(data):
    with pytest.raises(GrammarError):
        GestureGrammar.from_dict(data)


def test_grammar_error_is_value_error():
    assert issubclass(GrammarError, ValueError)


def test_valid_parameter_values_classify(make_hand):
    grammar = GestureGrammar.from_dict({
        'one_hand': [
            {'symbol': 'swipe_right', 'fingers': '1111',
             'checks': [{'name': 'moving', 'direction': 'right', 'point': 'palm',
                         'frames': 5, 'min_distance': 0.0}]},
            {'symbol': 'down', 'fingers': '1000',
             'checks': [{'name': 'pointing_down', 'finger': 'index'}]},
            {'symbol': 'open', 'fingers': '1111', 'thumb': False},
        ],
        'two_hand': [
            {'symbol': 'thumbs', 'checks': [{'name': 'tips_close', 'finger': 'thumb'}]},
        ],
    })
    classifier = GestureClassifier(grammar)

    history = LandmarkHistory()
    for i in range(5):
        hand = make_hand("1111", wrist=(0.4 + i * 0.02, 0.6))
        history.push(0, hand)
    assert classifier.classify([hand], history) == "swipe_right"

    # A still hand has no motion and must not divide by zero
    still = LandmarkHistory()
    for _ in range(5):
        still.push(0, make_hand("1111"))
    assert classifier.classify([make_hand("1111")], still) == "open"

    assert classifier.classify([make_hand("1000", rotation=180)]) == "down"
