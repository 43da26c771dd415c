"""Tests for the activity segmenter."""

from activity_insights.config import SegmenterSettings
from activity_insights.models import Observation
from activity_insights.segmenter import ActivitySegmenter, segment

from conftest import BASE_MS


def ticks(app_name, title, start_s, count, **extra):
    return [
        Observation(
            timestamp=BASE_MS + (start_s + i) * 1000,
            app_name=app_name,
            window_title=title,
            **extra,
        )
        for i in range(count)
    ]


class TestActivitySegmenter:
    def test_starts_idle(self):
        segmenter = ActivitySegmenter()

        assert segmenter.is_tracking is False
        assert segmenter.stop() is None
        assert segmenter.drain() == []

    def test_first_observation_opens_span(self):
        segmenter = ActivitySegmenter()

        flushed = segmenter.feed(ticks("Editor", "main.py", 0, 1)[0])

        assert flushed is None
        assert segmenter.is_tracking is True
        assert segmenter.current.duration == 1000

    def test_identical_observations_extend_span(self):
        segmenter = ActivitySegmenter()
        for observation in ticks("Editor", "main.py", 0, 5):
            assert segmenter.feed(observation) is None

        record = segmenter.stop()

        assert record.timestamp == BASE_MS
        assert record.duration == 5000
        assert segmenter.is_tracking is False

    def test_title_change_flushes_span(self):
        segmenter = ActivitySegmenter()
        for observation in ticks("Editor", "a.py", 0, 3):
            segmenter.feed(observation)

        flushed = segmenter.feed(ticks("Editor", "b.py", 3, 1)[0])

        assert flushed.window_title == "a.py"
        assert flushed.duration == 3000
        assert segmenter.current.window_title == "b.py"

    def test_stop_flushes_and_drain_returns_everything(self):
        segmenter = ActivitySegmenter()
        for observation in ticks("Editor", "a.py", 0, 2) + ticks("Browser", "docs", 2, 4):
            segmenter.feed(observation)
        segmenter.stop()

        records = segmenter.drain()

        assert [r.app_name for r in records] == ["Editor", "Browser"]
        assert segmenter.drain() == []

    def test_zero_duration_span_is_suppressed(self):
        segmenter = ActivitySegmenter()
        segmenter.feed(Observation(timestamp=BASE_MS, app_name="Editor", duration=0))

        assert segmenter.stop() is None
        assert segmenter.drain() == []

    def test_counters_accumulate_and_scores_track_latest(self):
        observations = [
            Observation(BASE_MS, "Editor", "x", keystrokes=3, mouse_clicks=1, focus_score=0.2),
            Observation(BASE_MS + 1000, "Editor", "x", keystrokes=4, focus_score=0.6),
            Observation(BASE_MS + 2000, "Editor", "x", mouse_clicks=2, cpu_usage=12.5),
        ]

        (record,) = segment(observations)

        assert record.keystrokes == 7
        assert record.mouse_clicks == 3
        assert record.focus_score == 0.6
        assert record.cpu_usage == 12.5

    def test_empty_app_name_becomes_unknown(self):
        (record,) = segment(ticks("", "title", 0, 2))

        assert record.app_name == "Unknown"

    def test_browser_titles_are_normalized_before_matching(self):
        observations = [
            Observation(BASE_MS, "chrome.exe", "Docs - Google Chrome"),
            Observation(BASE_MS + 1000, "chrome.exe", "Docs and 3 more pages - Google Chrome"),
        ]

        (record,) = segment(observations)

        assert record.window_title == "Docs"
        assert record.duration == 2000

    def test_url_extracted_from_browser_title(self):
        (record,) = segment(
            [Observation(BASE_MS, "Firefox", "https://example.com/page - Mozilla Firefox")]
        )

        assert record.url == "https://example.com/page"

    def test_custom_tick(self):
        records = segment(ticks("Editor", "a", 0, 3), SegmenterSettings(tick_ms=500))

        assert records[0].duration == 1500


class TestSegmentProperties:
    def test_records_do_not_overlap(self):
        observations = (
            ticks("Editor", "a", 0, 3)
            + ticks("Browser", "b", 3, 2)
            + ticks("Editor", "a", 5, 4)
            + ticks("Chat", "c", 20, 1)
        )

        records = segment(observations)

        assert len(records) == 4
        for previous, current in zip(records, records[1:]):
            assert previous.timestamp + previous.duration <= current.timestamp

    def test_each_record_is_one_unbroken_run(self):
        observations = ticks("Editor", "a", 0, 2) + ticks("Editor", "a", 2, 2)

        records = segment(observations)

        assert len(records) == 1
        assert records[0].duration == 4000
