import os
from unittest import mock

from quantumc.compiler import build_command, main


def test_build_command_stages():
    tools = os.path.join("opt", "tools")
    assert build_command("prog.c", "out.bin", tools) == [
        ["cc", "-E", "-x", "c", "prog.c"],
        [os.path.join(tools, "tokenizer")],
        [os.path.join(tools, "tokenparser"), "-o", "out.bin"],
    ]


def test_build_command_reads_stdin_without_source():
    stages = build_command(None, "a.out", "tools")
    assert stages[0][-1] == "-"
    assert stages[-1][-2:] == ["-o", "a.out"]


def test_build_command_default_tool_dir_is_shared():
    stages = build_command("prog.c")
    assert os.path.dirname(stages[1][0]) == os.path.dirname(stages[2][0])
    assert stages[2][-1] == "a.out"


def test_main_missing_output_path(capsys):
    assert main(["-o"]) == 1
    assert "File path not given after '-o' option" in capsys.readouterr().err


def _stage_commands(popen):
    return [call.args[0] for call in popen.call_args_list]


def test_main_runs_pipeline():
    with mock.patch("subprocess.Popen") as popen:
        popen.return_value.wait.return_value = 0
        assert main(["prog.c", "-o", "out.bin"]) == 0
    commands = _stage_commands(popen)
    assert len(commands) == 3
    assert commands[0] == ["cc", "-E", "-x", "c", "prog.c"]
    assert commands[2][-2:] == ["-o", "out.bin"]


def test_main_dash_keeps_default_output():
    with mock.patch("subprocess.Popen") as popen:
        popen.return_value.wait.return_value = 0
        assert main(["prog.c", "-o", "-"]) == 0
    assert _stage_commands(popen)[2][-2:] == ["-o", "a.out"]


def test_main_reports_failed_stage():
    with mock.patch("subprocess.Popen") as popen:
        popen.return_value.wait.return_value = 1
        assert main(["prog.c"]) == 1


def test_main_reports_missing_tool(capsys):
    with mock.patch("subprocess.Popen", side_effect=FileNotFoundError("cc")):
        assert main(["prog.c"]) == 1
    assert "cc" in capsys.readouterr().err