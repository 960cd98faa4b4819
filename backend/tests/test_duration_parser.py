from backend.steptimer.services.duration_parser import (
    DurationParser,
    format_mmss,
    has_duration,
    parse_duration,
)


def test_minutes():
    assert parse_duration("Bake for 25 minutes") == 1500


def test_hours_and_minutes_sum():
    assert parse_duration("Simmer for 1 hour 30 minutes") == 5400


def test_every_occurrence_counts():
    assert parse_duration("simmer 1 hour 30 minutes, then rest 2 minutes") == 5520


def test_seconds():
    assert parse_duration("Cook for 45 seconds") == 45


def test_no_duration():
    assert parse_duration("Stir well") is None
    assert parse_duration("") is None


def test_zero_is_found():
    assert parse_duration("Rest for 0 minutes") == 0
    assert has_duration("Rest for 0 minutes")


def test_abbreviations_and_case():
    assert parse_duration("Roast 2 HRS") == 7200
    assert parse_duration("Blanch 30sec") == 30
    assert parse_duration("Chill 5 min") == 300
    assert parse_duration("Proof 1h") == 3600


def test_integers_only():
    # "1.5 hours" reads as "5 hours"
    assert parse_duration("Braise 1.5 hours") == 5 * 3600


def test_no_word_boundary():
    # a bare "s" after a number is read as seconds
    assert parse_duration("Add 2 sprigs of thyme") == 2


def test_has_duration():
    assert has_duration("Bake for 20 min")
    assert not has_duration("Season to taste")


def test_custom_unit_table():
    parser = DurationParser(units=((86400, ("day", "d")),))
    assert parser.parse("Cure for 2 days") == 172800
    assert parser.parse("Cure for 2 hours") is None


def test_format_mmss():
    assert format_mmss(599) == "09:59"
    assert format_mmss(0) == "00:00"
    assert format_mmss(5400) == "90:00"


def test_longer_spelling_beats_its_prefix():
    parser = DurationParser(units=((1, ("m",)), (60, ("min",))))
    assert parser.parse("Whisk 5 min") == 300
    assert parser.parse("Whisk 5 m") == 5
