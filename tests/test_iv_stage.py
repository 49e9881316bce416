import json

from integration.iv_stage import DEFAULT_FIXTURE, main, run_iv_stage


def test_run_iv_stage_on_fixture():
    summary = run_iv_stage(DEFAULT_FIXTURE)
    assert summary["metric"] == 247000
    assert summary["swaps"] == 2
    assert summary["witness"]["total_volume"] == 3034050000000000000000
    assert summary["witness"]["tick"] == 200169
    assert summary["output_hex"] == "0x" + (247000).to_bytes(31, "big").hex()


def test_main_prints_json(capsys):
    assert main(["--fixture", str(DEFAULT_FIXTURE)]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["metric"] == 247000


def test_main_reports_bad_config(tmp_path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("version: 1\n", encoding="utf-8")
    assert main(["--config", str(bad)]) == 1


def test_main_reports_constraint_violation(tmp_path, swap_fixture):
    swap_fixture["storage"]["liquidity"]["slot"] = "0x3"
    path = tmp_path / "fixture.json"
    path.write_text(json.dumps(swap_fixture), encoding="utf-8")
    assert main(["--fixture", str(path)]) == 1


def test_main_reports_missing_fixture(tmp_path):
    assert main(["--fixture", str(tmp_path / "missing.json")]) == 1


def test_summary_includes_slot0_and_input():
    summary = run_iv_stage(DEFAULT_FIXTURE)
    assert summary["slot0"]["tick"] == 200169
    assert summary["slot0"]["unlocked"] is True
    assert summary["window_start_block"] is None
    assert len(summary["input"]["receipts"]) == 2
    assert [s["block_num"] for s in summary["input"]["storage"]] == [22135817, 22135817]
    assert summary["input"]["storage"][1]["value"] == "0x" + format(17525466147715557006, "064x")


def _write_fixture(tmp_path, data):
    path = tmp_path / "fixture.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_swaps_inside_lookback_window_are_kept(tmp_path, swap_fixture):
    swap_fixture["latest_block"] = {"number": 22135817, "timestamp": 1_742_800_000}
    summary = run_iv_stage(_write_fixture(tmp_path, swap_fixture))
    assert summary["window_start_block"] == 22135817 - 7200
    assert summary["swaps"] == 2
    assert summary["metric"] == 247000


def test_swaps_before_lookback_window_are_dropped(tmp_path, swap_fixture):
    # window starts at 22131800, after both swaps
    swap_fixture["latest_block"] = {"number": 22139000, "timestamp": 1_742_800_000}
    summary = run_iv_stage(_write_fixture(tmp_path, swap_fixture))
    assert summary["window_start_block"] == 22131800
    assert summary["swaps"] == 0
    assert summary["metric"] == 0


def test_main_reports_bad_latest_block(tmp_path, swap_fixture):
    swap_fixture["latest_block"] = {"number": 22135817}
    assert main(["--fixture", str(_write_fixture(tmp_path, swap_fixture))]) == 1


def test_main_reports_invalid_json(tmp_path):
    path = tmp_path / "fixture.json"
    path.write_text("{not json", encoding="utf-8")
    assert main(["--fixture", str(path)]) == 1
