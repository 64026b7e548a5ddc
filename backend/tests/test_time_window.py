"""Time window classification tests."""
import pytest

from qrattend.services.time_window_service import (
    TimeWindowClassifier, TimeWindowResult, minute_of_day
)

classify = TimeWindowClassifier().classify

def test_minute_of_day():
    assert minute_of_day('00:00') == 0
    assert minute_of_day('08:05') == 485
    assert minute_of_day('23:59') == 1439

@pytest.mark.parametrize('now,expected', [
    ('07:54', TimeWindowResult.TOO_EARLY),
    ('07:55', TimeWindowResult.ON_TIME),   # grace opens
    ('07:59', TimeWindowResult.ON_TIME),
    ('08:00', TimeWindowResult.ON_TIME),
    ('08:15', TimeWindowResult.ON_TIME),   # threshold minute itself is on time
    ('08:16', TimeWindowResult.LATE),
    ('09:00', TimeWindowResult.LATE),
    ('09:01', TimeWindowResult.LATE),      # after-end grace
    ('09:10', TimeWindowResult.LATE),
    ('09:11', TimeWindowResult.TOO_LATE),
])
def test_boundaries(now, expected):
    assert classify('08:00', '09:00', 15, now) == expected

def test_concrete_scenario():
    assert classify('08:00', '09:00', 15, '08:05') == TimeWindowResult.ON_TIME
    assert classify('08:00', '09:00', 15, '08:20') == TimeWindowResult.LATE
    assert classify('08:00', '09:00', 15, '07:40') == TimeWindowResult.TOO_EARLY

def test_early_grace_is_on_time_for_every_minute():
    for minute in range(55, 60):
        assert classify('08:00', '09:00', 15, f'07:{minute:02d}') == TimeWindowResult.ON_TIME

def test_zero_threshold_makes_any_minute_after_start_late():
    assert classify('08:00', '09:00', 0, '08:00') == TimeWindowResult.ON_TIME
    assert classify('08:00', '09:00', 0, '08:01') == TimeWindowResult.LATE

def test_threshold_beyond_end_still_late_after_end():
    assert classify('08:00', '08:30', 60, '08:30') == TimeWindowResult.ON_TIME
    assert classify('08:00', '08:30', 60, '08:31') == TimeWindowResult.LATE

def test_out_of_window_flag():
    assert TimeWindowResult.TOO_EARLY.is_out_of_window
    assert TimeWindowResult.TOO_LATE.is_out_of_window
    assert not TimeWindowResult.LATE.is_out_of_window

def test_custom_grace():
    wide = TimeWindowClassifier(grace_before=30, grace_after=0)
    assert wide.classify('08:00', '09:00', 15, '07:30') == TimeWindowResult.ON_TIME
    assert wide.classify('08:00', '09:00', 15, '09:01') == TimeWindowResult.TOO_LATE
