import pytest

from gestures import GestureClassifier, LandmarkHistory, get_grammar, NONE, FIST


@pytest.fixture
def signs():
    return GestureClassifier(get_grammar('signs'))


@pytest.fixture
def letters():
    return GestureClassifier(get_grammar('letters'))


def classify_motion(classifier, make_hand, pattern, positions, **kwargs):
    """Replay one hand across positions, classifying the last frame."""
    history = LandmarkHistory(slots=2, capacity=25)
    hand = None
    for pos in positions:
        hand = make_hand(pattern, wrist=pos, **kwargs)
        history.push(0, hand)
    return classifier.classify([hand], history)


def test_no_hands_is_none(signs):
    assert signs.classify([]) == NONE


@pytest.mark.parametrize("pattern,thumb,expected", [
    ("1000", "tucked", "hello"),
    ("1000", "out", "u_suck"),
    ("1100", "tucked", "okay"),
    ("0100", "tucked", "fuck_u"),
    ("1001", "out", "i_love_you"),
    ("0001", "tucked", "thank_you"),
    ("1111", "tucked", "nadim"),
    ("0000", "tucked", FIST),
])
def test_single_hand_signs(signs, make_hand, pattern, thumb, expected):
    assert signs.classify([make_hand(pattern, thumb=thumb)]) == expected


def test_all_tips_pinched_wins_over_finger_shapes(signs, make_pinched_hand):
    assert signs.classify([make_pinched_hand()]) == "what_do_u_want"


def test_two_index_fingers_together(signs, make_hand):
    # Index tips 0.05 apart
    left = make_hand("1000", wrist=(0.45, 0.6))
    right = make_hand("1000", wrist=(0.50, 0.6))
    assert signs.classify([left, right]) == "nice_to_meet"


def test_two_hands_apart_fall_back_to_first_hand(signs, make_hand):
    left = make_hand("1000", wrist=(0.3, 0.6))
    right = make_hand("1000", wrist=(0.7, 0.6))
    assert signs.classify([left, right]) == "hello"


def test_one_hand_never_matches_two_hand_rule(signs, make_hand):
    assert signs.classify([make_hand("1000", wrist=(0.45, 0.6))]) == "hello"


def test_waving_open_hand_is_goodbye(signs, make_hand):
    positions = [(0.5 if i % 2 == 0 else 0.53, 0.6) for i in range(12)]
    assert classify_motion(signs, make_hand, "1111", positions) == "goodbye"


def test_still_open_hand_with_history_is_nadim(signs, make_hand):
    positions = [(0.5, 0.6)] * 12
    assert classify_motion(signs, make_hand, "1111", positions) == "nadim"


def test_extension_follows_hand_rotation(signs, make_hand):
    # Sideways and upside-down hands still count the raised index
    assert signs.classify([make_hand("1000", rotation=90)]) == "hello"
    assert signs.classify([make_hand("0000", rotation=180)]) == FIST


def test_degenerate_hand_does_not_crash(signs):
    from gestures import HandLandmarks
    flat = HandLandmarks(landmarks=[(0.5, 0.5, 0.0)] * 21)
    assert signs.classify([flat]) in get_grammar('signs').symbols


# ---------------------------------------------------------------------------
# Letters
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("kwargs,expected", [
    (dict(fingers="1000", thumb="tucked"), "D"),
    (dict(fingers="1000", thumb="out"), "L"),
    (dict(fingers="1000", thumb="out", rotation=90), "G"),
    (dict(fingers="1000", thumb="tucked", rotation=180), "Q"),
    (dict(fingers="0000", thumb="up"), "A"),
    (dict(fingers="0000", thumb="tucked"), FIST),
    (dict(fingers="0001", thumb="out"), "Y"),
    (dict(fingers="0001", thumb="tucked"), "I"),
    (dict(fingers="0111", thumb="tucked"), "F"),
    (dict(fingers="1110", thumb="tucked"), "W"),
    (dict(fingers="1111", thumb="tucked"), "B"),
])
def test_static_letters(letters, make_hand, kwargs, expected):
    assert letters.classify([make_hand(**kwargs)]) == expected


def test_index_middle_family_ordering(letters, make_hand):
    # Spread tips first, then sideways, then the plain shape
    assert letters.classify([make_hand("1100", spread=0.02)]) == "V"
    assert letters.classify([make_hand("1100", rotation=90)]) == "H"
    assert letters.classify([make_hand("1100")]) == "U"


def test_pinched_hand_is_o(letters, make_pinched_hand):
    assert letters.classify([make_pinched_hand()]) == "O"


def test_z_stroke(letters, make_hand):
    xs = [0.40, 0.43, 0.46, 0.49, 0.46, 0.43, 0.40, 0.43, 0.46, 0.49, 0.52, 0.55]
    positions = [(x, 0.6 + i * 0.005) for i, x in enumerate(xs)]
    assert classify_motion(letters, make_hand, "1000", positions) == "Z"


def test_j_needs_motion(letters, make_hand):
    still = [(0.5, 0.6)] * 10
    assert classify_motion(letters, make_hand, "0001", still) == "I"

    moving = [(0.5 - i * 0.01, 0.6 + i * 0.01) for i in range(10)]
    assert classify_motion(letters, make_hand, "0001", moving) == "J"
