import io

import pytest

from oslab.phase1 import Phase1Error, Phase1Machine, main, run


def job(program, *data):
    lines = ["$AMJ000100030001", program, "$DTA", *data, "$END0001"]
    return "\n".join(lines) + "\n"


def test_read_and_print_worked_example():
    out = run(job("GD10PD10H", "Hello World"))
    assert out == "Hello World".ljust(40) + "\n\n\n"


def test_load_places_words_in_memory():
    machine = Phase1Machine(io.StringIO("$AMJ000100010001\nGD10PD10H\n"), io.StringIO())
    machine.load()
    assert machine.memory[0] == "GD10"
    assert machine.memory[1] == "PD10"
    assert machine.memory[2] == "H\n\0-"


def test_second_card_starts_at_ninth_word():
    machine = Phase1Machine(io.StringIO("$AMJ\nX\nY\n"), io.StringIO())
    machine.load()
    assert machine.memory[0] == "X\n\0-"
    assert machine.memory[9] == "Y\n\0-"


def test_load_and_store_copies_word():
    direct = run(job("GD10PD10H", "abcdefgh"))
    copied = run(job("GD10LR10SR20PD20H", "abcdefgh"))
    assert copied.startswith("abcd")
    assert direct.startswith("abcdefgh")
    assert copied.split("\n")[0].rstrip() == "abcd"


def test_branch_taken_after_compare_skips_print():
    out = run(job("GD10LR10CR10BT05PD10H", "abcd"))
    assert out == "\n\n"


def test_branch_not_taken_without_compare():
    out = run(job("GD10BT04PD10H", "abcd"))
    assert out.startswith("abcd")
    assert out.endswith("\n\n\n")


def test_jobs_are_independent():
    first = job("GD10PD10H", "first job")
    second = job("GD20PD20H", "second job")
    assert run(first + second) == run(first) + run(second)


def test_bad_operand_raises():
    with pytest.raises(Phase1Error):
        run(job("GD1XH", "data"))


def test_running_off_memory_raises():
    with pytest.raises(Phase1Error):
        run("$AMJ\nLR10\n$DTA\n")


def test_reset_clears_state():
    machine = Phase1Machine(io.StringIO(""), io.StringIO())
    machine.memory[5] = "ABCD"
    machine.cr = True
    machine.ictr = 7
    machine.reset()
    assert machine.memory[5] == "----"
    assert machine.cr is False
    assert machine.ictr == 0


def test_main_writes_output_file(tmp_path):
    text = job("GD10PD10H", "Hello World")
    source = tmp_path / "input.txt"
    target = tmp_path / "output.txt"
    source.write_text(text, encoding="utf-8")
    assert main([str(source), str(target)]) == 0
    with open(target, encoding="utf-8", newline="") as handle:
        assert handle.read() == run(text)


def test_main_reports_missing_input(tmp_path, capsys):
    assert main([str(tmp_path / "absent.txt"), str(tmp_path / "out.txt")]) == 1
    assert "Error opening file." in capsys.readouterr().out