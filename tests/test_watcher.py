"""Tests for the source tree watcher."""

from pathlib import Path

from spindle.config import configure
from spindle.pipeline import PipelineError
from spindle.watcher import SourceWatcher, _ChangeHandler


class DummyEvent:
    def __init__(self, path, event_type="modified", is_directory=False, dest_path=""):
        self.src_path = path
        self.dest_path = dest_path
        self.event_type = event_type
        self.is_directory = is_directory


class RecordingPipeline:
    def __init__(self, error=None):
        self.handled = []
        self.error = error

    def handle(self, changed, done=None):
        if self.error:
            raise self.error
        self.handled.append(changed)
        written = Path("/out") / changed.path.name
        if done:
            done(written)
        return written


def make_watcher(tmp_path, pipeline, verbose=False):
    config = configure(tmp_path, {"source": "src", "extensions": ["js", "ktml"]})
    return SourceWatcher(config, pipeline, verbose)


def test_handler_dispatches_configured_extensions(tmp_path):
    pipeline = RecordingPipeline()
    handler = _ChangeHandler(make_watcher(tmp_path, pipeline))

    handler.on_any_event(DummyEvent(str(tmp_path / "src" / "app.js")))
    handler.on_any_event(DummyEvent(str(tmp_path / "src" / "style.css")))
    handler.on_any_event(DummyEvent(str(tmp_path / "src" / "app.min.js")))
    handler.on_any_event(DummyEvent(str(tmp_path / "src"), is_directory=True))
    handler.on_any_event(DummyEvent(str(tmp_path / "src" / "old.js"), event_type="deleted"))

    assert [changed.path.name for changed in pipeline.handled] == ["app.js"]
    assert pipeline.handled[0].extension == "js"


def test_handler_uses_destination_of_moves(tmp_path):
    pipeline = RecordingPipeline()
    handler = _ChangeHandler(make_watcher(tmp_path, pipeline))
    handler.on_any_event(
        DummyEvent(
            str(tmp_path / "src" / ".index.ktml.swp"),
            event_type="moved",
            dest_path=str(tmp_path / "src" / "index.ktml"),
        )
    )
    assert [changed.path.name for changed in pipeline.handled] == ["index.ktml"]


def test_dispatch_reports_written_path_when_verbose(tmp_path, capsys):
    watcher = make_watcher(tmp_path, RecordingPipeline(), verbose=True)
    assert watcher.dispatch(tmp_path / "src" / "app.js") == Path("/out/app.js")
    assert "Wrote /out/app.js" in capsys.readouterr().out


def test_dispatch_survives_pipeline_errors(tmp_path, capsys):
    source = tmp_path / "src" / "app.js"
    error = PipelineError(source, "Could not write: disk full")
    watcher = make_watcher(tmp_path, RecordingPipeline(error))
    assert watcher.dispatch(source) is None
    err = capsys.readouterr().err
    assert "Failed:" in err
    assert "disk full" in err


def test_accepts_skips_hidden_files(tmp_path):
    watcher = make_watcher(tmp_path, RecordingPipeline())
    source = tmp_path / "src"
    assert watcher.accepts(source / "index.ktml")
    assert not watcher.accepts(source / ".index.ktml")
    assert not watcher.accepts(source / "readme.md")
    assert not watcher.accepts(source / ".cache" / "bundle.js")


def test_start_and_stop(tmp_path):
    (tmp_path / "src").mkdir()
    watcher = make_watcher(tmp_path, RecordingPipeline())
    watcher.start()
    assert watcher._observer is not None
    watcher.stop()
    assert watcher._observer is None
