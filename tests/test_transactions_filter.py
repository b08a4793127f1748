def test_transactions_filter(client):
    payload = {
        "q": [
            {
            "fixed": 0,
            "start": "2023-07-01 00:00:00",
            "end": "2023-07-31 23:59:59"
            }
        ],
        "p": [
            {
            "extra": 30,
            "start": "2023-10-01 00:00:00",
            "end": "2023-12-31 23:59:59"
            }
        ],
        "k": [
            {
            "start": "2023-01-01 00:00:00",
            "end": "2023-12-31 23:59:59"
            }
        ],
        "wage": 50000,
        "transactions": [
            {
                "date": "2023-12-17 08:09:45",
                "amount": -10
            }
        ]
    }

    response = client.post(
        "/blackrock/challenge/v1/transactions:filter",
        json=payload
    )

    assert response.status_code == 200

    data = response.get_json()

    assert len(data["invalid"]) == 1
    assert data["invalid"][0] == {
        "date": "2023-12-17 08:09:45",
        "amount": -10,
        "message": "Negative or zero amount is not allowed",
    }
    assert data["valid"] == []


def test_transactions_filter_without_windows(client):
    payload = {
        "wage": 100,
        "transactions": [{"date": "2023-01-01 10:00:00", "amount": 45}],
    }

    response = client.post("/blackrock/challenge/v1/transactions:filter", json=payload)

    assert response.status_code == 200
    assert response.get_json() == {
        "valid": [
            {
                "date": "2023-01-01 10:00:00",
                "amount": 45,
                "ceiling": 100,
                "remanent": 55,
                "inKPeriod": False,
            }
        ],
        "invalid": [],
    }


def test_transactions_filter_full_example(client):
    payload = {
        "q": [{"fixed": 0, "start": "2023-07-01 00:00:00", "end": "2023-07-31 23:59:59"}],
        "p": [{"extra": 25, "start": "2023-10-01 08:00:00", "end": "2023-12-31 19:59:59"}],
        "k": [
            {"start": "2023-03-01 00:00:00", "end": "2023-11-31 23:59:59"},
            {"start": "2023-01-01 00:00:00", "end": "2023-12-31 23:59:59"},
        ],
        "wage": 50000,
        "transactions": [
            {"date": "2023-02-28 15:49:20", "amount": 375},
            {"date": "2023-07-01 21:59:00", "amount": 620},
            {"date": "2023-10-12 20:15:30", "amount": 250},
            {"date": "2023-12-17 08:09:45", "amount": 480},
            {"date": "2023-12-17 08:09:45", "amount": 480},
        ],
    }

    response = client.post("/blackrock/challenge/v1/transactions:filter", json=payload)

    assert response.status_code == 200

    data = response.get_json()

    assert [(t["date"], t["remanent"]) for t in data["valid"]] == [
        ("2023-02-28 15:49:20", 25),
        ("2023-10-12 20:15:30", 75),
        ("2023-12-17 08:09:45", 45),
    ]
    assert all(t["inKPeriod"] for t in data["valid"])
    assert len(data["invalid"]) == 1
    assert data["invalid"][0]["message"] == "Duplicate transaction"
    assert data["invalid"][0]["remanent"] == 45


def test_transactions_filter_rejects_bad_window(client):
    payload = {
        "q": [{"start": "2023-07-01 00:00:00", "end": "2023-07-31 23:59:59"}],
        "wage": 100,
        "transactions": [],
    }

    response = client.post("/blackrock/challenge/v1/transactions:filter", json=payload)

    assert response.status_code == 422
    assert "fixed" in response.get_json()["error"]


def test_transactions_filter_requires_transactions(client):
    response = client.post(
        "/blackrock/challenge/v1/transactions:filter",
        json={"wage": 100},
    )

    assert response.status_code == 422
