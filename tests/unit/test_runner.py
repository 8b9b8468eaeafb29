"""Unit tests for ScoutRunner, driven by small fake worker scripts."""

import asyncio
import json
import os
import sys
import tempfile
import textwrap
import time

import pytest

from web_scout.errors import WorkerSpawnFailed
from web_scout.scout.models import RunStatus
from web_scout.scout.runner import ScoutRunner

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")

PREAMBLE = textwrap.dedent('''
    import json, os, signal, stat, sys, time

    def emit(text, model="fake-model", inp=100, out=20, cost=0.0125, newline=True):
        event = {
            "type": "message_end",
            "message": {
                "role": "assistant",
                "model": model,
                "content": [{"type": "text", "text": text}],
                "usage": {"input": inp, "output": out, "cost": {"total": cost}},
            },
        }
        sys.stdout.write(json.dumps(event) + ("\\n" if newline else ""))
        sys.stdout.flush()

    prompt_path = sys.argv[sys.argv.index("--append-system-prompt") + 1]
''')

WORKERS = {
    "ok": '''
emit("thinking...")
mode = oct(stat.S_IMODE(os.stat(prompt_path).st_mode))
with open(prompt_path) as f:
    prompt = f.read()
emit(json.dumps({"path": prompt_path, "mode": mode, "prompt": prompt, "task": sys.argv[-1]}))
''',
    "fail": '''
sys.stderr.write("scout exploded\\n")
sys.exit(3)
''',
    "noisy": '''
print("not json")
print('{"type": "agent_start"}')
print("")
emit("middle")
emit("tail without newline", newline=False)
''',
    "stubborn": '''
signal.signal(signal.SIGTERM, signal.SIG_IGN)
emit("ready")
time.sleep(60)
''',
    "silent_fail": '''
sys.exit(1)
''',
}


@pytest.fixture
def worker(tmp_path):
    def make(kind, grace_period=0.5):
        script = tmp_path / f"{kind}_worker.py"
        script.write_text(PREAMBLE + textwrap.dedent(WORKERS[kind]))
        return ScoutRunner(command=[sys.executable, str(script)], grace_period=grace_period)

    return make


async def run(runner, tmp_path, **kwargs):
    return await runner.run(
        cwd=str(tmp_path),
        task_text="Research task: test",
        system_prompt="You are a web research specialist.",
        model="fake-model",
        extension_path="/ext",
        **kwargs,
    )


def test_build_args():
    runner = ScoutRunner(command=["pi"], tools="read,bash")
    args = runner.build_args("m", "/ext", "/tmp/p.md", "Research task: x")
    assert args == [
        "pi", "--mode", "json", "-p", "--no-session",
        "--model", "m", "--tools", "read,bash", "-e", "/ext",
        "--append-system-prompt", "/tmp/p.md", "Task: Research task: x",
    ]


@pytest.mark.asyncio
async def test_successful_run(worker, tmp_path):
    updates = []
    result = await run(worker("ok"), tmp_path, on_update=updates.append)

    assert result.status == RunStatus.COMPLETED
    assert result.ok
    assert result.exit_code == 0
    assert result.usage.turn_count == 2
    assert result.usage.input_tokens == 200
    assert result.usage.output_tokens == 40
    assert result.usage.cost_total == pytest.approx(0.025)
    assert result.usage.model_used == "fake-model"
    assert updates[0] == "thinking..."

    seen = json.loads(result.final_output_text)
    assert seen["prompt"] == "You are a web research specialist."
    assert seen["mode"] == "0o600"
    assert seen["task"] == "Task: Research task: test"
    assert not os.path.exists(seen["path"])
    assert not os.path.exists(os.path.dirname(seen["path"]))


@pytest.mark.asyncio
async def test_nonzero_exit_reports_stderr(worker, tmp_path):
    result = await run(worker("fail"), tmp_path)
    assert result.status == RunStatus.FAILED
    assert result.exit_code == 3
    assert "scout exploded" in result.stderr_text
    assert result.failure_text() == "scout exploded"


@pytest.mark.asyncio
async def test_failure_without_output(worker, tmp_path):
    result = await run(worker("silent_fail"), tmp_path)
    assert result.status == RunStatus.FAILED
    assert result.failure_text() == "(no output)"


@pytest.mark.asyncio
async def test_malformed_lines_skipped_and_tail_flushed(worker, tmp_path):
    result = await run(worker("noisy"), tmp_path)
    assert result.status == RunStatus.COMPLETED
    assert result.final_output_text == "tail without newline"
    assert result.usage.turn_count == 2


@pytest.mark.asyncio
async def test_cancel_escalates_to_kill(worker, tmp_path):
    cancel = asyncio.Event()
    runner = worker("stubborn", grace_period=0.5)

    started = time.monotonic()
    result = await run(runner, tmp_path, cancel_event=cancel,
                       on_update=lambda text: cancel.set())
    elapsed = time.monotonic() - started

    assert result.status == RunStatus.CANCELLED
    assert result.final_output_text == "ready"
    assert elapsed < 10


@pytest.mark.asyncio
async def test_cancelled_before_spawn(worker, tmp_path):
    cancel = asyncio.Event()
    cancel.set()
    result = await run(worker("ok"), tmp_path, cancel_event=cancel)
    assert result.status == RunStatus.CANCELLED
    assert result.exit_code == -1
    assert result.usage.turn_count == 0


@pytest.mark.asyncio
async def test_spawn_failure(tmp_path, monkeypatch):
    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))
    runner = ScoutRunner(command=[str(tmp_path / "no-such-binary")])
    with pytest.raises(WorkerSpawnFailed) as exc_info:
        await run(runner, tmp_path)
    assert exc_info.value.kind == "spawn_failed"
    assert list(scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_callback_errors_do_not_break_run(worker, tmp_path):
    def explode(text):
        raise ValueError("callback bug")

    result = await run(worker("ok"), tmp_path, on_update=explode)
    assert result.status == RunStatus.COMPLETED
    assert result.usage.turn_count == 2


@pytest.mark.asyncio
async def test_temp_dir_failure_is_spawn_failure(worker, tmp_path, monkeypatch):
    def no_space(*args, **kwargs):
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(tempfile, "mkdtemp", no_space)
    with pytest.raises(WorkerSpawnFailed) as exc_info:
        await run(worker("ok"), tmp_path)
    assert isinstance(exc_info.value.cause, OSError)


@pytest.mark.asyncio
async def test_prompt_write_failure_cleans_up(worker, tmp_path, monkeypatch):
    from web_scout.scout import runner as runner_module

    scratch = tmp_path / "scratch"
    scratch.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(scratch))

    def read_only(path, text):
        raise PermissionError(13, "Read-only file system")

    monkeypatch.setattr(runner_module, "_write_private", read_only)
    with pytest.raises(WorkerSpawnFailed, match="instructions"):
        await run(worker("ok"), tmp_path)
    assert list(scratch.iterdir()) == []
