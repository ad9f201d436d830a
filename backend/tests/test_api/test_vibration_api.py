"""
Unit tests for the vibration planning API endpoints.

Tests include:
- PSD templates, upload, integration, octave and band endpoints
- Mission template browsing and rescaling
- Equivalency, thermal cycle, reliability and fixture endpoints
- Plan building and gated exports
- Validation errors
"""

import csv
import json
from io import BytesIO, StringIO

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from vibration_wizard.main import app


CRITICAL_DUT = {"m_dut_kg": 0, "fn_dut_hz_min": 150, "fn_dut_hz_max": 400}
GOOD_DUT = {
    "m_dut_kg": 2.0,
    "fn_dut_hz_min": 150.0,
    "fn_dut_hz_max": 400.0,
    "fixture_mass_kg": 8.0,
    "span_mm": 200.0,
}


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def plan_payload(two_state_payload):
    return {
        "profile": two_state_payload,
        "accel": {"t_test_h": 48.0},
        "reliability": {"r_target": 0.9, "cl": 0.9, "c_allowed": 0},
    }


class TestPsdEndpoints:
    """Test /api/psd endpoints."""

    def test_list_templates(self, client):
        response = client.get("/api/psd/templates")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        ids = [t["id"] for t in data]
        assert "random-transport" in ids
        assert all(t["grms"] > 0 for t in data)

    def test_resolve_template(self, client):
        request_data = {"definition": {"kind": "Template", "template_id": "shock-event", "scale": 2.0}}

        response = client.post("/api/psd/resolve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["points"][0] == {"f_hz": 10.0, "g2_per_hz": 0.02}
        assert data["grms"] == pytest.approx(data["area"] ** 0.5)

    def test_resolve_csv_definition(self, client):
        request_data = {
            "definition": {
                "kind": "Csv",
                "name": "custom",
                "points": [{"f_hz": 2000, "g2_per_hz": 0.01}, {"f_hz": 20, "g2_per_hz": 0.01}],
            }
        }

        response = client.post("/api/psd/resolve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [p["f_hz"] for p in data["points"]] == [20.0, 2000.0]
        assert data["area"] == pytest.approx(19.8)

    def test_resolve_unknown_template(self, client):
        response = client.post(
            "/api/psd/resolve",
            json={"definition": {"kind": "Template", "template_id": "nope"}}
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_resolve_unknown_kind(self, client):
        response = client.post("/api/psd/resolve", json={"definition": {"kind": "Sine"}})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_upload(self, client):
        content = b"freq,psd\n20,0.01\nbad,row\n2000,0.01\n"

        response = client.post(
            "/api/psd/upload",
            files={"file": ("spectrum.csv", content, "text/csv")}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["name"] == "spectrum.csv"
        assert data["rows"] == 2
        assert data["area"] == pytest.approx(19.8)

    def test_upload_without_rows(self, client):
        response = client.post(
            "/api/psd/upload",
            files={"file": ("empty.csv", b"freq,psd\n", "text/csv")}
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_integrate_band(self, client):
        request_data = {
            "points": [{"f_hz": 10, "g2_per_hz": 0.01}, {"f_hz": 100, "g2_per_hz": 0.01}],
            "f1": 20,
            "f2": 50,
        }

        response = client.post("/api/psd/integrate", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["area"] == pytest.approx(0.3)

    def test_integrate_duplicate_points(self, client):
        request_data = {"points": [{"f_hz": 10, "g2_per_hz": 0.01}, {"f_hz": 10, "g2_per_hz": 0.02}]}
        response = client.post("/api/psd/integrate", json=request_data)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_integrate_needs_two_points(self, client):
        response = client.post("/api/psd/integrate", json={"points": [{"f_hz": 10, "g2_per_hz": 0.01}]})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_negative_density_rejected(self, client):
        request_data = {"points": [{"f_hz": 10, "g2_per_hz": -0.01}, {"f_hz": 100, "g2_per_hz": 0.01}]}
        response = client.post("/api/psd/integrate", json=request_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_octave(self, client):
        request_data = {
            "points": [{"f_hz": 20, "g2_per_hz": 0.01}, {"f_hz": 2000, "g2_per_hz": 0.01}],
            "fraction": 3,
        }

        response = client.post("/api/psd/octave", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["points"]
        assert data["raw_area"] == pytest.approx(19.8)

    def test_octave_warning_on_tight_tolerance(self, client):
        request_data = {
            "points": [{"f_hz": 20, "g2_per_hz": 0.01}, {"f_hz": 2000, "g2_per_hz": 0.01}],
            "fraction": 1,
            "tolerance": 1e-9,
        }

        response = client.post("/api/psd/octave", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        assert "deviates" in response.json()["warning"]

    def test_bands(self, client):
        request_data = {
            "points": [{"f_hz": 20, "g2_per_hz": 0.01}, {"f_hz": 2000, "g2_per_hz": 0.01}],
            "band_count": 6,
            "top": 2,
        }

        response = client.post("/api/psd/bands", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert len(data["bands"]) == 6
        assert len(data["top_bands"]) == 2


class TestMissionEndpoints:
    """Test /api/missions template endpoints."""

    def test_list_templates(self, client):
        response = client.get("/api/missions/templates")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()) == 18

    def test_filter_by_industry(self, client):
        response = client.get("/api/missions/templates", params={"industry": "Healthcare"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [t["id"] for t in data] == ["health-wearable"]
        assert data[0]["state_count"] == 4

    def test_unknown_industry(self, client):
        response = client.get("/api/missions/templates", params={"industry": "Aerospace"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_get_template(self, client):
        response = client.get("/api/missions/templates/datacenter-rack")

        assert response.status_code == status.HTTP_200_OK
        profile = response.json()["profile"]
        assert profile["name"] == "Rack Server"
        assert profile["total_hours"] == pytest.approx(40000)
        assert profile["states"][0]["psd"]["kind"] == "Template"

    def test_get_missing_template(self, client):
        response = client.get("/api/missions/templates/missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_default_template(self, client):
        response = client.get("/api/missions/templates/default/Automotive")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == "auto-body-ecu"

    def test_rescale(self, client, two_state_payload):
        two_state_payload["intended_life_h"] = 2400.0

        response = client.post("/api/missions/rescale", json={"profile": two_state_payload})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert [s["duration_h"] for s in data["states"]] == pytest.approx([2000.0, 400.0])
        assert data["total_hours"] == pytest.approx(2400.0)

    def test_duplicate_state_ids_rejected(self, client, two_state_payload):
        two_state_payload["states"][1]["id"] = "transport"
        response = client.post("/api/missions/rescale", json={"profile": two_state_payload})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_inverted_cycle_rejected(self, client, two_state_payload):
        two_state_payload["states"][1]["thermal"]["tmin_c"] = 90.0
        response = client.post("/api/missions/rescale", json={"profile": two_state_payload})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestEquivalencyEndpoint:
    """Test /api/equivalency/solve endpoint."""

    def test_solve(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "accel": {"t_test_h": 48.0}}

        response = client.post("/api/equivalency/solve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["acceleration_factor"] == pytest.approx(25.0)
        assert data["k_scale"] == pytest.approx(25.0 ** (2 / 7.5))
        assert data["fatigue_exponent"] == pytest.approx(7.5)
        assert data["damage_ratio"] == pytest.approx(1.0)
        assert len(data["contributions"]) == 2

    def test_solve_for_duration(self, client, two_state_payload):
        request_data = {
            "states": two_state_payload["states"],
            "accel": {"solve_for": "t_test", "k_scale": 25.0 ** (2 / 7.5)},
        }

        response = client.post("/api/equivalency/solve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["t_test_h"] == pytest.approx(48.0)

    def test_solve_for_both(self, client, two_state_payload):
        request_data = {
            "states": two_state_payload["states"],
            "accel": {"solve_for": "both", "t_test_h": 48.0, "k_scale": 1.0},
        }

        response = client.post("/api/equivalency/solve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["t_test_h"] == pytest.approx(240.0)
        assert data["k_scale"] == pytest.approx(25.0 ** (1 / 7.5))
        assert data["damage_ratio"] == pytest.approx(1.0)

    def test_user_selected_base_shape(self, client, two_state_payload):
        request_data = {
            "states": two_state_payload["states"],
            "accel": {
                "t_test_h": 48.0,
                "base_shape": "UserSelectedState",
                "selected_state_id": "transport",
            },
        }

        response = client.post("/api/equivalency/solve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["base_state_id"] == "transport"
        assert data["damage_ratio"] == pytest.approx(1.0)

    def test_zero_test_duration_insufficient(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "accel": {"t_test_h": 0}}

        response = client.post("/api/equivalency/solve", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["insufficient_data"] is True
        assert "Test duration must be positive." in data["notes"]

    def test_unknown_template_noted(self, client, two_state_payload):
        states = two_state_payload["states"]
        states[1]["psd"]["template_id"] = "missing"

        response = client.post("/api/equivalency/solve", json={"states": states})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total_field_h"] == pytest.approx(1000.0)
        assert any("missing" in n for n in data["notes"])

    def test_no_states(self, client):
        response = client.post("/api/equivalency/solve", json={"states": []})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["insufficient_data"] is True

    def test_invalid_method(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "accel": {"method": "Magic"}}
        response = client.post("/api/equivalency/solve", json=request_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestThermalEndpoint:

    def test_cycle(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "t_test_h": 48.0}

        response = client.post("/api/thermal/cycle", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["repeats"] == 3
        assert data["cycle_minutes"] == pytest.approx(960.0)
        assert data["total_minutes"] == pytest.approx(2880.0)
        assert data["points"][0] == {"t_min": 0.0, "temp_c": 35.0}

    def test_zero_duration_gives_empty_cycle(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "t_test_h": 0}
        response = client.post("/api/thermal/cycle", json=request_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["points"] == []
        assert data["segments"] == []
        assert data["repeats"] == 0

    def test_negative_duration_rejected(self, client, two_state_payload):
        request_data = {"states": two_state_payload["states"], "t_test_h": -1}
        response = client.post("/api/thermal/cycle", json=request_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestReliabilityEndpoints:
    """Test /api/reliability endpoints."""

    def test_sample_size(self, client):
        response = client.post("/api/reliability/sample-size", json={"r_target": 0.9, "cl": 0.95})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["sample_size"] == 29
        assert data["converged"] is True

    def test_sample_size_defaults(self, client):
        response = client.post("/api/reliability/sample-size", json={})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["sample_size"] == 22

    @pytest.mark.parametrize("payload", [
        {"r_target": 1.0},
        {"r_target": 0.0},
        {"cl": 0},
        {"cl": 1.5},
    ])
    def test_sample_size_out_of_range_not_solvable(self, client, payload):
        response = client.post("/api/reliability/sample-size", json=payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["sample_size"] == 0
        assert data["solvable"] is False
        assert data["converged"] is False

    def test_negative_failures_rejected(self, client):
        response = client.post("/api/reliability/sample-size", json={"c_allowed": -1})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_confidence_out_of_range(self, client):
        response = client.post("/api/reliability/confidence", json={"n": 22, "r_target": 1.0})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["confidence"] == 0.0

    def test_demonstrated_reliability_out_of_range(self, client):
        response = client.post("/api/reliability/reliability", json={"n": 29, "cl": 1.0})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reliability"] is None

    def test_confidence(self, client):
        response = client.post("/api/reliability/confidence", json={"n": 22, "r_target": 0.9})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["confidence"] == pytest.approx(1 - 0.9 ** 22)

    def test_demonstrated_reliability(self, client):
        response = client.post("/api/reliability/reliability", json={"n": 29, "cl": 0.95})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reliability"] == pytest.approx(0.05 ** (1 / 29))

    def test_demonstrated_reliability_unsolvable(self, client):
        response = client.post("/api/reliability/reliability", json={"n": 3, "c_allowed": 3, "cl": 0.9})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reliability"] is None

    def test_curve(self, client):
        response = client.post("/api/reliability/curve", json={"r_target": 0.9, "n_center": 29})

        assert response.status_code == status.HTTP_200_OK
        points = response.json()["points"]
        assert points
        assert points == sorted(points, key=lambda p: p["n"])


class TestFixtureEndpoint:

    def test_evaluate(self, client):
        response = client.post("/api/fixture/evaluate", json={"dut": GOOD_DUT})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["f_fixture_min_hz"] == pytest.approx(600.0)
        assert data["mass_ratio"] == pytest.approx(4.0)
        assert data["has_critical"] is False
        assert data["checklist"]

    def test_critical_inputs_reported_not_rejected(self, client):
        response = client.post("/api/fixture/evaluate", json={"dut": CRITICAL_DUT})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["has_critical"] is True
        assert any(w["level"] == "Critical" for w in data["warnings"])

    def test_band_risks(self, client):
        band = {"f_start": 25, "f_end": 36, "f_center": 30, "energy": 1, "weight": 1, "score": 1}

        response = client.post("/api/fixture/evaluate", json={"dut": GOOD_DUT, "damage_bands": [band]})

        assert response.status_code == status.HTTP_200_OK
        assert any("Rigid-body" in w["message"] for w in response.json()["warnings"])


class TestPlanEndpoint:
    """Test /api/plan endpoint."""

    def test_plan(self, client, plan_payload):
        plan_payload["dut"] = GOOD_DUT

        response = client.post("/api/plan", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["profile_name"] == "Transport and handling"
        assert data["sample_size"]["sample_size"] == 22
        assert data["acceptance_rule"] == "Test 22 units for 48.0 h each; accept if failures <= 0."
        assert data["thermal_cycle"]["repeats"] == 3
        assert data["fixture"]["f_fixture_min_hz"] == pytest.approx(600.0)
        assert data["has_critical_warnings"] is False
        assert data["test_octave"]["points"]

    def test_plan_without_dut(self, client, plan_payload):
        response = client.post("/api/plan", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["fixture"] is None

    def test_plan_rescaled(self, client, plan_payload):
        plan_payload["profile"]["intended_life_h"] = 2400.0
        plan_payload["rescale_to_intended_life"] = True

        response = client.post("/api/plan", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["equivalency"]["total_field_h"] == pytest.approx(2400.0)

    def test_plan_with_unreachable_reliability(self, client, plan_payload):
        plan_payload["reliability"]["r_target"] = 1.0

        response = client.post("/api/plan", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["sample_size"]["sample_size"] == 0
        assert data["sample_size"]["solvable"] is False
        assert data["equivalency"]["acceleration_factor"] == pytest.approx(25.0)

    def test_plan_missing_profile(self, client):
        response = client.post("/api/plan", json={"accel": {"t_test_h": 48.0}})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestExportEndpoints:
    """Test /api/export endpoints and the acknowledgment gate."""

    def test_playlist_csv(self, client, plan_payload):
        response = client.post("/api/export/csv/playlist", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert "psd_playlist.csv" in response.headers["content-disposition"]
        rows = list(csv.reader(StringIO(response.text)))
        assert rows[0] == ["state", "f_hz", "g2_per_hz"]
        assert {r[0] for r in rows[1:]} == {"Transport", "Shock"}

    def test_test_psd_csv(self, client, plan_payload):
        response = client.post("/api/export/csv/test-psd", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert "psd_test_profile.csv" in response.headers["content-disposition"]
        assert response.text.startswith("f_hz,g2_per_hz\n")

    def test_json_snapshot(self, client, plan_payload):
        response = client.post("/api/export/json", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        snapshot = json.loads(response.text)
        assert list(snapshot) == ["profile", "accel", "reliability", "sampleSize", "equivalency", "fixture"]
        assert snapshot["sampleSize"] == 22
        assert snapshot["fixture"] is None

    def test_critical_blocks_export(self, client, plan_payload):
        plan_payload["dut"] = CRITICAL_DUT

        response = client.post("/api/export/json", json=plan_payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert "critical" in response.json()["detail"]

    def test_short_reason_blocks_export(self, client, plan_payload):
        plan_payload["dut"] = CRITICAL_DUT
        plan_payload["acknowledgment"] = {"acknowledged": True, "reason": "ok"}

        response = client.post("/api/export/csv/test-psd", json=plan_payload)

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_acknowledged_export(self, client, plan_payload):
        plan_payload["dut"] = CRITICAL_DUT
        plan_payload["acknowledgment"] = {"acknowledged": True, "reason": "Mass not measured yet"}

        response = client.post("/api/export/json", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert json.loads(response.text)["fixture"]["warnings"]

    def test_fixture_html(self, client, plan_payload):
        plan_payload["dut"] = GOOD_DUT

        response = client.post("/api/export/html/fixture", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/html")
        assert "Fixture frequency min: 600.0 Hz" in response.text

    def test_fixture_html_needs_dut(self, client, plan_payload):
        response = client.post("/api/export/html/fixture", json=plan_payload)
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_excel(self, client, plan_payload):
        plan_payload["dut"] = GOOD_DUT
        plan_payload["title"] = "Transport plan"

        response = client.post("/api/export/excel", json=plan_payload)

        assert response.status_code == status.HTTP_200_OK
        assert "vibration_plan.xlsx" in response.headers["content-disposition"]
        wb = load_workbook(BytesIO(response.content))
        assert "Fixture" in wb.sheetnames
        assert wb["Summary"]["B1"].value == "Transport plan"


class TestRootEndpoints:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["endpoints"]["plan"] == "/api/plan"
