import io
import random

import pytest

from oslab.phase2 import ErrorCode, PCB, Phase2Machine, main, run


def job(job_id, ttl, tll, program, data=()):
    lines = [f"$AMJ{job_id:04d}{ttl:04d}{tll:04d}", *program, "$DTA", *data, f"$END{job_id:04d}"]
    return "\n".join(lines) + "\n"


def loaded_machine(text, seed=3):
    output = io.StringIO()
    machine = Phase2Machine(io.StringIO(text), output, random.Random(seed))
    machine.load()
    return machine, output


def test_simple_job_full_output():
    out = run(job(1, 10, 1, ["GD10PD10H"], ["HELLO WORLD"]), seed=1)
    assert out == (
        "HELLO WORLD\n"
        "\nNo Error: Program executed successfully\n"
        "Job Id :1  IC: 3  IR: H  SI: 3  PI: 0  TI: 0  TLL: 1  LLC: 1  TTL: 10  TTC: 4  \n\n\n"
    )


def test_output_does_not_depend_on_frame_choice():
    text = job(1, 10, 1, ["GD10PD10H"], ["HELLO WORLD"])
    assert run(text, seed=1) == run(text, seed=2)
    assert run(text, seed=9) == run(text, seed=9)


def test_out_of_data_then_next_job_runs():
    text = job(1, 20, 5, ["GD10GD20H"], ["X"]) + job(2, 10, 1, ["GD10PD10H"], ["OK"])
    out = run(text, seed=4)
    assert out.index("Error: Out of Data") < out.index("No Error: Program executed successfully")
    assert "Job Id :2" in out
    assert "OK\n" in out


def test_line_limit_exceeded():
    out = run(job(1, 20, 1, ["GD10PD10PD10H"], ["HI"]), seed=5)
    assert out.startswith("HI\n\nError: Line Limit Exceeded\n")
    assert out.count("HI\n") == 1


def test_time_limit_exceeded_after_write():
    out = run(job(1, 3, 5, ["GD10PD10H"], ["AB"]), seed=6)
    assert out.startswith("AB\n\nError: Time Limit Exceeded\n")
    assert "TI: 2" in out


def test_operation_code_error():
    out = run(job(1, 10, 1, ["XX10H"]), seed=7)
    assert "\nError: Operation Code Error\nJob Id :1" in out
    assert "IR: XX10" in out


def test_operation_code_error_under_time_limit():
    out = run(job(1, 1, 1, ["LR00XX00H"]), seed=7)
    assert "\nError: Operation Code Error\nError: Time Limit Exceeded\n" in out


def test_operand_error():
    out = run(job(1, 10, 1, ["GDA0H"]), seed=8)
    assert "\nError: Operand Error\n" in out


def test_invalid_page_fault_on_print():
    out = run(job(1, 10, 1, ["PD10H"]), seed=8)
    assert "\nError: Invalid Page Fault\n" in out


def test_register_compare_and_branch():
    program = ["GD10LR10SR20CR20BT06PD10PD20H"]
    out = run(job(1, 20, 2, program, ["ABCDEFGH"]), seed=2)
    assert out.startswith("ABCD\n\nNo Error: Program executed successfully\n")


def test_leftover_data_cards_are_ignored():
    text = job(1, 10, 1, ["H"], ["EXTRA", "MORE"]) + job(2, 10, 1, ["H"])
    out = run(text, seed=3)
    assert "EXTRA" not in out
    assert out.count("No Error: Program executed successfully") == 2


def test_pcb_records_job_card_fields():
    machine, _ = loaded_machine(job(7, 10, 1, ["GD10PD10H"], ["HELLO"]))
    assert machine.pcb.job_id == 7
    assert machine.pcb.ttl == 10
    assert machine.pcb.tll == 1
    assert machine.pcb.llc == 1
    assert machine.pcb.ttc <= machine.pcb.ttl


def test_address_map_translates_through_page_table():
    machine, output = loaded_machine("$AMJ000100100001\nGD10PD10H\n")
    frame = int(machine.memory[machine.ptr][:2])
    assert machine.address_map(7) == frame * 10 + 7
    assert machine.memory[frame * 10] == "GD10"
    assert machine.memory[frame * 10 + 2] == "H\0\0\0"
    assert output.getvalue() == ""


def test_address_map_out_of_range_is_operand_error():
    machine, output = loaded_machine("$AMJ000100100001\nGD10PD10H\n")
    assert machine.address_map(100) is None
    assert "Error: Operand Error" in output.getvalue()
    assert machine.terminated


def test_address_map_unmapped_read_is_invalid_page_fault():
    machine, output = loaded_machine("$AMJ000100100001\nGD10PD10H\n")
    assert machine.address_map(50) is None
    assert "Error: Invalid Page Fault" in output.getvalue()


def test_page_table_frames_are_distinct():
    machine, _ = loaded_machine("$AMJ000100100001\nGD10PD10\nPD10PD10\nH\n")
    entries = [machine.memory[machine.ptr + offset] for offset in range(3)]
    frames = {int(entry[:2]) for entry in entries}
    assert len(frames) == 3
    assert machine.ptr // 10 not in frames
    assert all(entry.endswith("**") for entry in entries)
    assert machine.memory[machine.ptr + 3] == "****"


def test_too_many_program_cards():
    text = "$AMJ000100100001\n" + "PD10\n" * 11
    with pytest.raises(RuntimeError, match="page table"):
        run(text, seed=1)


def test_malformed_job_card():
    with pytest.raises(ValueError, match="malformed job card"):
        run("$AMJ00X1\nH\n", seed=1)


def test_program_card_outside_job():
    with pytest.raises(RuntimeError, match="outside a job"):
        run("GD10PD10H\n", seed=1)


def test_error_code_messages():
    assert ErrorCode(6).message == "Error: Invalid Page Fault"
    assert ErrorCode.OUT_OF_DATA.message == "Error: Out of Data"
    assert ErrorCode.NONE.message == "No Error: Program executed successfully"


def test_pcb_defaults():
    assert PCB() == PCB(job_id=0, ttl=0, tll=0, ttc=0, llc=0)


def test_main_appends_to_output(tmp_path):
    source = tmp_path / "input.txt"
    target = tmp_path / "output.txt"
    source.write_text(job(1, 10, 1, ["GD10PD10H"], ["HELLO WORLD"]), encoding="utf-8")
    assert main([str(source), str(target), "--seed", "4"]) == 0
    assert main([str(source), str(target), "--seed", "5"]) == 0
    text = target.read_text(encoding="utf-8")
    assert text.count("HELLO WORLD\n") == 2
    assert text.count("No Error: Program executed successfully") == 2


def test_main_missing_input(tmp_path):
    assert main([str(tmp_path / "absent.txt"), str(tmp_path / "out.txt")]) == 1