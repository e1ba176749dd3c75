import math

import pytest

from ivt_stream.config import ConfigurationError, SessionConfig, VelocityMode
from ivt_stream.domain import MovementType, RawGazeSample
from ivt_stream.processor import GazeSampleProcessor

from conftest import angle_sequence, binocular, eye_at_angle

BLINK = RawGazeSample(
    gaze_point_normalized=(math.nan, math.nan),
    gaze_point_ucs=(math.nan, math.nan, math.nan),
    gaze_origin_ucs=(math.nan, math.nan, math.nan),
    validity=False,
)


@pytest.mark.parametrize(
    "first",
    [
        binocular(0, eye_at_angle(0.0)),
        binocular(-5, BLINK),
        binocular(10**12, eye_at_angle(40.0, valid=False), eye_at_angle(-3.0)),
    ],
)
def test_first_sample_produces_no_event(session_config, first):
    processor = GazeSampleProcessor(session_config)
    assert processor.process_sample(first) is None
    assert processor.state.bootstrapped


def test_steady_state_event_fields(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(1_000_000, eye_at_angle(0.0)))
    event = processor.process_sample(
        binocular(1_010_000, eye_at_angle(1.0, normalized=(0.25, 0.75)), eye_at_angle(0.0, normalized=(0.5, 0.5)))
    )

    assert event is not None
    assert event.system_timestamp == 1_010_000
    assert event.device_timestamp == 1_010_017
    assert event.interval_usec == 10_000

    assert (event.left.x_px, event.left.y_px) == (480.0, 810.0)
    assert event.left.angular_velocity == pytest.approx(100.0, rel=1e-6)
    assert event.left.movement is MovementType.SACCADE
    assert event.left.valid is True

    assert (event.right.x_px, event.right.y_px) == (960.0, 540.0)
    assert event.right.angular_velocity == pytest.approx(0.0, abs=1e-3)
    assert event.right.movement is MovementType.NOT_A_SACCADE


def test_regressing_timestamp_clamps_interval_to_zero(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(50_000, eye_at_angle(0.0)))
    event = processor.process_sample(binocular(40_000, eye_at_angle(1.0)))

    assert event.interval_usec == 0
    assert math.isnan(event.left.angular_velocity)
    assert event.left.movement is MovementType.UNKNOWN
    assert event.left.valid is False


def test_intervals_never_negative(session_config):
    processor = GazeSampleProcessor(session_config)
    times = [0, 10_000, 5_000, 5_000, 30_000, 29_999, 40_000]
    samples = [binocular(t, eye_at_angle(0.0)) for t in times]
    events = list(processor.process_many(samples))
    assert [e.interval_usec for e in events] == [10_000, 0, 0, 25_000, 0, 10_001]


def test_raw_invalid_flag_downgrades_validity_only(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(0, eye_at_angle(0.0)))
    event = processor.process_sample(binocular(10_000, eye_at_angle(1.0, valid=False), eye_at_angle(1.0)))

    assert event.left.valid is False
    assert event.left.movement is MovementType.SACCADE
    assert event.right.valid is True


def test_nan_velocity_marks_eye_invalid_without_affecting_other_eye(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(0, eye_at_angle(0.0)))
    event = processor.process_sample(binocular(10_000, BLINK, eye_at_angle(0.1)))

    assert math.isnan(event.left.angular_velocity)
    assert event.left.movement is MovementType.UNKNOWN
    assert event.left.valid is False
    assert event.right.movement is MovementType.NOT_A_SACCADE
    assert event.right.valid is True


def test_accumulator_is_zero_after_saccade(session_config):
    processor = GazeSampleProcessor(session_config)
    for sample in angle_sequence([0.0, 0.0, 0.0, 0.0]):
        processor.process_sample(sample)
    assert processor.state.left.accumulated_not_a_saccade_ms == pytest.approx(30.0)

    event = processor.process_sample(binocular(40_000, eye_at_angle(5.0)))
    assert event.left.movement is MovementType.SACCADE
    assert processor.state.left.accumulated_not_a_saccade_usec == 0


def test_fixation_after_150_ms_of_slow_gaze(session_config):
    processor = GazeSampleProcessor(session_config)
    # 0.02 deg per 10 ms -> 2 deg/s, well below 30 deg/s
    angles = [0.02 * i for i in range(21)]
    events = list(processor.process_many(angle_sequence(angles)))

    labels = [e.left.movement for e in events]
    assert labels[:14] == [MovementType.NOT_A_SACCADE] * 14
    assert labels[14:] == [MovementType.FIXATION] * 6


def test_indeterminate_tick_keeps_accumulated_duration(session_config):
    processor = GazeSampleProcessor(session_config)
    for sample in angle_sequence([0.0] * 11):
        processor.process_sample(sample)
    assert processor.state.left.accumulated_not_a_saccade_ms == pytest.approx(100.0)

    processor.process_sample(binocular(110_000, BLINK))
    assert processor.state.left.accumulated_not_a_saccade_ms == pytest.approx(100.0)


def test_previous_sample_is_overwritten_by_invalid_tick(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(0, eye_at_angle(0.0)))
    invalid = processor.process_sample(binocular(10_000, eye_at_angle(5.0, valid=False)))
    assert invalid.left.valid is False

    # Measured against the invalid sample at 5 degrees, not the first one at 0
    event = processor.process_sample(binocular(20_000, eye_at_angle(5.0)))
    assert event.left.angular_velocity == pytest.approx(0.0, abs=1e-3)
    assert processor.state.previous_system_timestamp == 20_000


def test_blink_becomes_baseline_for_next_delta(session_config):
    processor = GazeSampleProcessor(session_config)
    for sample in (binocular(0, eye_at_angle(0.0)), binocular(10_000, BLINK)):
        processor.process_sample(sample)
    event = processor.process_sample(binocular(20_000, eye_at_angle(0.0)))

    assert math.isnan(event.left.angular_velocity)
    assert event.left.movement is MovementType.UNKNOWN


def test_disabled_classification_reports_unknown_everywhere(make_session):
    processor = GazeSampleProcessor(make_session(threshold=0.0))
    events = list(processor.process_many(angle_sequence([0.0, 10.0, 10.0, 0.5, 30.0])))

    assert len(events) == 4
    for event in events:
        assert event.left.movement is MovementType.UNKNOWN
        assert event.right.movement is MovementType.UNKNOWN
    assert not math.isnan(events[0].left.angular_velocity)


def test_eyes_are_classified_independently(session_config):
    processor = GazeSampleProcessor(session_config)
    processor.process_sample(binocular(0, eye_at_angle(0.0), eye_at_angle(0.0)))
    event = processor.process_sample(binocular(10_000, eye_at_angle(4.0), eye_at_angle(0.0)))

    assert event.left.movement is MovementType.SACCADE
    assert event.right.movement is MovementType.NOT_A_SACCADE
    assert processor.state.right.accumulated_not_a_saccade_ms == pytest.approx(10.0)


def test_pixel_pitch_mode(make_session):
    processor = GazeSampleProcessor(make_session(mode=VelocityMode.PIXEL_PITCH_DISTANCE))
    processor.process_sample(binocular(0, eye_at_angle(0.0, normalized=(0.5, 0.5))))
    event = processor.process_sample(binocular(20_000, eye_at_angle(0.0, normalized=(0.5 + 2.0 / 530.0, 0.5))))

    expected = math.degrees(math.atan2(2.0, 600.0)) / 0.02
    assert event.left.angular_velocity == pytest.approx(expected, rel=1e-9)
    assert event.left.movement is MovementType.NOT_A_SACCADE
    assert processor.pixel_pitch_h == pytest.approx(530.0 / 1920.0)
    assert processor.pixel_pitch_v == pytest.approx(300.0 / 1080.0)


def test_reset_starts_a_new_session(session_config):
    processor = GazeSampleProcessor(session_config)
    samples = angle_sequence([0.0, 0.0, 0.0])
    assert len(list(processor.process_many(samples))) == 2

    processor.reset()
    assert processor.process_sample(samples[0]) is None


def test_event_record_is_flat(session_config):
    processor = GazeSampleProcessor(session_config)
    events = list(processor.process_many(angle_sequence([0.0, 1.0])))
    record = events[0].to_record()

    assert record["interval_usec"] == 10_000
    assert record["left_movement"] == "Saccade"
    assert record["right_x_px"] == 960.0
    assert set(record) >= {"left_valid", "right_velocity_deg_per_sec", "device_time_stamp"}


def test_session_config_factories():
    config = SessionConfig.create(1920, 1080, 530, 300, velocity_mode="pixel-pitch-distance")
    assert config.velocity_mode is VelocityMode.PIXEL_PITCH_DISTANCE
    assert config.classifier.not_a_saccade_duration_threshold_ms == 60.0

    loaded = SessionConfig.from_dict(
        {
            "screen_width_px": 2560,
            "screen_height_px": 1440,
            "display_width_mm": 597.0,
            "display_height_mm": 336.0,
            "velocity_threshold_deg_per_sec": 45,
        }
    )
    assert loaded.velocity_mode is VelocityMode.GAZE_VECTOR_ANGLE
    assert loaded.classifier.velocity_threshold_deg_per_sec == 45.0


@pytest.mark.parametrize(
    "data",
    [
        {"screen_width_px": 0, "screen_height_px": 1080, "display_width_mm": 530, "display_height_mm": 300},
        {"screen_width_px": 1920, "screen_height_px": 1080, "display_width_mm": 530},
        {
            "screen_width_px": 1920,
            "screen_height_px": 1080,
            "display_width_mm": 530,
            "display_height_mm": 300,
            "velocity_mode": "optical_flow",
        },
    ],
)
def test_invalid_session_config(data):
    with pytest.raises(ConfigurationError):
        SessionConfig.from_dict(data)
