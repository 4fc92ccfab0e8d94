# backend/cpusim/test_api.py
import pytest
from fastapi.testclient import TestClient

from cpusim.main import app


@pytest.fixture()
def client():
    return TestClient(app)


FCFS_PROCS = [
    {"arrival_time": 0, "burst_time": 5},
    {"arrival_time": 1, "burst_time": 3},
]


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "running" in r.json()["message"]


def test_algorithms_listed(client):
    data = client.get("/config/algorithms").json()
    ids = [a["id"] for a in data]
    assert ids == ["FCFS", "SJF", "SRTF", "RR", "PRIORITY_NP", "PRIORITY_P", "HRRN", "EDF", "RMS"]
    preemptive = {a["id"] for a in data if a["preemptive"]}
    assert preemptive == {"SRTF", "PRIORITY_P", "EDF", "RMS"}


def test_sample_and_random_configs(client):
    assert len(client.get("/config/sample").json()) == 4
    a = client.get("/config/random", params={"count": 3, "seed": 7}).json()
    b = client.get("/config/random", params={"count": 3, "seed": 7}).json()
    assert a == b and len(a) == 3


# ---------- /simulate ----------

def test_run_flat_payload(client):
    r = client.post("/simulate/run", json={"algorithm": "FCFS", "processes": FCFS_PROCS})
    assert r.status_code == 200
    data = r.json()
    assert data["finished"] is True
    assert [(b["process_id"], b["start"], b["end"]) for b in data["gantt"]] == [("P1", 0, 5), ("P2", 5, 8)]
    p2 = data["processes"][1]
    assert p2["pid"] == "P2"
    assert p2["waiting_time"] == 4
    assert p2["turnaround_time"] == 7
    assert p2["response_time"] == 4
    assert data["summary"]["avg_waiting"] == pytest.approx(2.0)


def test_run_nested_payload(client):
    body = {"config": {"algorithm": "RR", "time_quantum": 2},
            "processes": [{"arrival_time": 0, "burst_time": 5}, {"arrival_time": 0, "burst_time": 3}]}
    data = client.post("/simulate/run", json=body).json()
    assert data["config"] == {"algorithm": "RR", "time_quantum": 2}
    assert [b["process_id"] for b in data["gantt"]] == ["P1", "P2", "P1", "P2", "P1"]


def test_run_rejects_zero_burst(client):
    r = client.post("/simulate/run", json={"processes": [{"arrival_time": 0, "burst_time": 0}]})
    assert r.status_code == 422


def test_run_rejects_unknown_algorithm(client):
    r = client.post("/simulate/run", json={"algorithm": "MLFQ", "processes": FCFS_PROCS})
    assert r.status_code == 422


def test_tick_is_stateless(client):
    body = {
        "tick": 0,
        "processes": [{"pid": "P1", "arrival_time": 0, "burst_time": 2},
                      {"pid": "P2", "arrival_time": 0, "burst_time": 1}],
        "config": {"algorithm": "SJF"},
    }
    first = client.post("/simulate/tick", json=body).json()
    assert first["tick"] == 1
    assert first["executed_id"] == "P2"
    assert first["active_id"] is None
    assert first["ready_queue"] == ["P1"]
    states = {p["pid"]: p["state"] for p in first["processes"]}
    assert states == {"P1": "READY", "P2": "COMPLETED"}

    again = client.post("/simulate/tick", json=body).json()
    assert again == first

    nxt = client.post("/simulate/tick", json={
        "tick": first["tick"],
        "processes": first["processes"],
        "config": {"algorithm": "SJF"},
        "ready_queue": first["ready_queue"],
        "active_id": first["active_id"],
        "quantum_elapsed": first["quantum_elapsed"],
    }).json()
    assert nxt["executed_id"] == "P1"
    assert nxt["active_id"] == "P1"


def test_tick_rejects_duplicate_ids(client):
    body = {"processes": [{"pid": "P1", "arrival_time": 0, "burst_time": 2},
                          {"pid": "P1", "arrival_time": 0, "burst_time": 1}]}
    assert client.post("/simulate/tick", json=body).status_code == 422


# ---------- /compare ----------

def test_compare_all_algorithms(client):
    r = client.post("/compare/", json={"processes": FCFS_PROCS})
    assert r.status_code == 200
    data = r.json()
    assert set(data["results"]) == {"FCFS", "SJF", "SRTF", "RR", "PRIORITY_NP", "PRIORITY_P", "HRRN", "EDF", "RMS"}
    assert data["results"]["FCFS"]["avg_waiting"] == pytest.approx(2.0)
    assert data["best_by_waiting"] in data["results"]


def test_compare_subset(client):
    data = client.post("/compare/", json={"processes": FCFS_PROCS, "algorithms": ["RR", "SRTF"]}).json()
    assert set(data["results"]) == {"RR", "SRTF"}


# ---------- /sessions ----------

def test_session_lifecycle(client):
    created = client.post("/sessions/", json={"preset": "default", "config": {"algorithm": "FCFS"}})
    assert created.status_code == 201
    state = created.json()
    sid = state["id"]
    assert [p["pid"] for p in state["processes"]] == ["P1", "P2", "P3", "P4"]
    assert state["tick"] == 0

    stepped = client.post(f"/sessions/{sid}/step", json={"ticks": 2}).json()
    assert stepped["executed"] == ["P1", "P1"]
    assert stepped["state"]["active_id"] == "P1"

    # removing the running process clears the CPU slot
    state = client.delete(f"/sessions/{sid}/processes/P1").json()
    assert state["active_id"] is None
    assert "P1" not in [p["pid"] for p in state["processes"]]

    stepped = client.post(f"/sessions/{sid}/step").json()
    assert stepped["executed"] == ["P2"]

    added = client.post(f"/sessions/{sid}/processes", json={"arrival_time": 3, "burst_time": 2})
    assert added.status_code == 201
    assert added.json()["pid"] == "P5"

    result = client.post(f"/sessions/{sid}/run").json()
    assert result["finished"] is True

    state = client.post(f"/sessions/{sid}/reset").json()
    assert state["tick"] == 0 and state["gantt"] == []

    assert client.delete(f"/sessions/{sid}").status_code == 204
    assert client.get(f"/sessions/{sid}").status_code == 404


def test_session_config_switch(client):
    sid = client.post("/sessions/", json={"processes": FCFS_PROCS}).json()["id"]
    state = client.put(f"/sessions/{sid}/config", json={"algorithm": "RR", "time_quantum": 1}).json()
    assert state["config"] == {"algorithm": "RR", "time_quantum": 1}


def test_session_config_switch_mid_run_rewinds(client):
    sid = client.post("/sessions/", json={"processes": FCFS_PROCS}).json()["id"]
    client.post(f"/sessions/{sid}/step", json={"ticks": 3})
    state = client.put(f"/sessions/{sid}/config", json={"algorithm": "SRTF"}).json()
    assert state["tick"] == 0
    assert state["gantt"] == []
    assert state["active_id"] is None


def test_session_rejects_arrival_before_current_tick(client):
    sid = client.post("/sessions/", json={"processes": FCFS_PROCS}).json()["id"]
    client.post(f"/sessions/{sid}/step", json={"ticks": 3})
    r = client.post(f"/sessions/{sid}/processes", json={"arrival_time": 1, "burst_time": 2})
    assert r.status_code == 422
    assert len(client.get(f"/sessions/{sid}").json()["processes"]) == len(FCFS_PROCS)


def test_session_errors(client):
    assert client.post("/sessions/", json={"preset": "nope"}).status_code == 422
    sid = client.post("/sessions/", json={}).json()["id"]
    assert client.delete(f"/sessions/{sid}/processes/P9").status_code == 404
    assert client.post(f"/sessions/{sid}/processes", json={"arrival_time": 0, "burst_time": 0}).status_code == 422
    assert client.post("/sessions/missing/step").status_code == 404
