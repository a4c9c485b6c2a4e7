"""Integration tests for member endpoints"""

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session
from fintcs_records.infrastructure.database.models import Member


def test_first_member_gets_mem_001(client: TestClient, society_id: str):
    response = client.post("/v1/members", json={"name": "A. Nair", "society_id": society_id})

    assert response.status_code == 201
    data = response.json()
    assert data["mem_no"] == "MEM_001"
    assert data["society_id"] == society_id
    assert data["status"] == "active"


def test_member_numbers_are_sequential(client: TestClient, society_id: str):
    numbers = [
        client.post("/v1/members", json={"name": f"Member {i}", "society_id": society_id}).json()["mem_no"]
        for i in range(3)
    ]
    assert numbers == ["MEM_001", "MEM_002", "MEM_003"]


def test_explicit_member_number_is_kept_and_continued(client: TestClient):
    explicit = client.post("/v1/members", json={"name": "Transferred", "mem_no": "MEM_120"})
    generated = client.post("/v1/members", json={"name": "New joiner"})

    assert explicit.json()["mem_no"] == "MEM_120"
    assert generated.json()["mem_no"] == "MEM_121"


def test_duplicate_explicit_member_number_conflicts(client: TestClient):
    client.post("/v1/members", json={"name": "First", "mem_no": "MEM_005"})
    response = client.post("/v1/members", json={"name": "Second", "mem_no": "MEM_005"})

    assert response.status_code == 409
    assert len(client.get("/v1/members").json()) == 1


def test_malformed_last_member_number_is_server_error(client: TestClient, db: Session):
    """A stored number that can't be parsed fails the create, it is not skipped"""
    db.add(Member(mem_no="MEM_X17", name="Legacy import"))
    db.commit()

    response = client.post("/v1/members", json={"name": "New joiner"})

    assert response.status_code == 500
    assert "MEM_X17" in response.json()["detail"]


def test_member_preview_does_not_reserve(client: TestClient):
    first = client.get("/v1/members/next-number").json()
    second = client.get("/v1/members/next-number").json()

    assert first == {"entity": "member", "number": "MEM_001"}
    assert second["number"] == "MEM_001"


def test_member_opening_balance_is_decimal(client: TestClient):
    response = client.post(
        "/v1/members",
        json={"name": "B. Menon", "opening_balance_share": "1250.50", "opening_balance_type": "Cr"},
    )
    assert response.json()["opening_balance_share"] == "1250.50"


def test_member_amount_with_too_many_places_rejected(client: TestClient):
    response = client.post("/v1/members", json={"name": "B. Menon", "opening_balance_share": "10.005"})
    assert response.status_code == 422


def test_member_unknown_society(client: TestClient):
    response = client.post(
        "/v1/members",
        json={"name": "Orphan", "society_id": "00000000-0000-0000-0000-000000000000"},
    )
    assert response.status_code == 404


def test_list_members_by_society(client: TestClient, society_id: str):
    other = client.post("/v1/societies", json={"name": "Other Society"}).json()["id"]
    client.post("/v1/members", json={"name": "Ours", "society_id": society_id})
    client.post("/v1/members", json={"name": "Theirs", "society_id": other})

    response = client.get("/v1/members", params={"society_id": society_id})

    assert [m["name"] for m in response.json()] == ["Ours"]


def test_get_member(client: TestClient):
    member_id = client.post("/v1/members", json={"name": "C. Pillai"}).json()["id"]

    assert client.get(f"/v1/members/{member_id}").json()["name"] == "C. Pillai"
    assert client.get("/v1/members/00000000-0000-0000-0000-000000000000").status_code == 404


def test_wider_explicit_member_number_rejected(client: TestClient):
    """MEM_0001 would sort above MEM_002 and stall generation"""
    client.post("/v1/members", json={"name": "First"})
    client.post("/v1/members", json={"name": "Second"})

    response = client.post("/v1/members", json={"name": "Odd import", "mem_no": "MEM_0001"})
    generated = client.post("/v1/members", json={"name": "Third"})

    assert response.status_code == 422
    assert "MEM_0001" in response.json()["detail"]
    assert generated.status_code == 201
    assert generated.json()["mem_no"] == "MEM_003"


def test_explicit_member_number_in_other_format_rejected(client: TestClient):
    for mem_no in ["MEM_X17", "M001", "MEM_000", "mem_001"]:
        assert client.post("/v1/members", json={"name": "Import", "mem_no": mem_no}).status_code == 422
    assert client.get("/v1/members").json() == []


def test_update_member(client: TestClient, society_id: str):
    member = client.post("/v1/members", json={"name": "A. Nair", "city": "Pune"}).json()

    response = client.put(
        f"/v1/members/{member['id']}",
        json={"city": "Nagpur", "opening_balance_share": "750.50", "society_id": society_id},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["mem_no"] == member["mem_no"]
    assert data["name"] == "A. Nair"
    assert data["city"] == "Nagpur"
    assert data["opening_balance_share"] == "750.50"
    assert data["society_id"] == society_id


def test_member_number_cannot_be_changed(client: TestClient):
    member = client.post("/v1/members", json={"name": "A. Nair"}).json()

    response = client.put(f"/v1/members/{member['id']}", json={"mem_no": "MEM_900"})

    assert response.status_code == 422
    assert client.get(f"/v1/members/{member['id']}").json()["mem_no"] == "MEM_001"


def test_update_member_rejects_null_name(client: TestClient):
    member = client.post("/v1/members", json={"name": "A. Nair"}).json()
    assert client.put(f"/v1/members/{member['id']}", json={"name": None}).status_code == 422


def test_update_missing_member(client: TestClient):
    response = client.put("/v1/members/00000000-0000-0000-0000-000000000000", json={"city": "Pune"})
    assert response.status_code == 404


def test_update_member_unknown_society(client: TestClient):
    member = client.post("/v1/members", json={"name": "A. Nair"}).json()

    response = client.put(
        f"/v1/members/{member['id']}",
        json={"society_id": "00000000-0000-0000-0000-000000000000"},
    )

    assert response.status_code == 404


def test_non_ascii_digit_suffix_counts_as_format_error(client: TestClient, db: Session):
    """MEM_² passes str.isdigit() but is not a number"""
    labels = {"entity": "member"}
    before = REGISTRY.get_sample_value("fintcs_sequence_format_errors_total", labels) or 0.0
    db.add(Member(mem_no="MEM_²", name="Legacy import"))
    db.commit()

    response = client.post("/v1/members", json={"name": "New joiner"})

    assert response.status_code == 500
    assert "MEM_²" in response.json()["detail"]
    assert REGISTRY.get_sample_value("fintcs_sequence_format_errors_total", labels) == before + 1
