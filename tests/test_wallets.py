from __future__ import annotations


API = "/api/v1"


def test_wallet_is_created_lazily(client, customer):
    r = client.get(f"{API}/wallets/balance/{customer['user']['id']}")
    assert r.status_code == 200
    assert r.json() == {
        "user_id": customer["user"]["id"],
        "balance": 0,
        "total_added": 0,
        "total_spent": 0,
        "total_refunded": 0,
    }
    assert client.get(f"{API}/wallets/balance/9999").status_code == 404


def test_topup_and_add_money(client, fake_stripe, customer):
    uid = customer["user"]["id"]
    r = client.post(f"{API}/wallets/topup-intent", json={"user_id": uid, "amount": 25.5})
    assert r.status_code == 200
    intent = r.json()
    assert intent["client_secret"] == "pi_test_1_secret"
    assert fake_stripe.intents["pi_test_1"].metadata == {"user_id": str(uid), "type": "wallet_topup"}

    payload = {"user_id": uid, "amount": 25.5, "payment_intent_id": intent["payment_intent_id"]}
    unpaid = client.post(f"{API}/wallets/add-money", json=payload)
    assert unpaid.status_code == 400
    assert unpaid.json()["detail"] == "Payment not completed"

    fake_stripe.succeed("pi_test_1")
    r = client.post(f"{API}/wallets/add-money", json=payload)
    assert r.status_code == 200
    assert r.json()["new_balance"] == 25.5
    assert r.json()["wallet"]["total_added"] == 25.5

    replay = client.post(f"{API}/wallets/add-money", json=payload)
    assert replay.status_code == 400
    assert replay.json()["detail"] == "Payment intent already credited"


def test_topup_validation(client, fake_stripe, customer):
    assert client.post(f"{API}/wallets/topup-intent", json={"user_id": customer["user"]["id"], "amount": 0}).status_code == 422
    assert client.post(f"{API}/wallets/topup-intent", json={"user_id": 9999, "amount": 10}).status_code == 404
    unknown_intent = client.post(
        f"{API}/wallets/add-money",
        json={"user_id": customer["user"]["id"], "amount": 10, "payment_intent_id": "pi_missing"},
    )
    assert unknown_intent.status_code == 502


def test_wallet_details_and_transactions(client, customer, fund_wallet):
    uid = customer["user"]["id"]
    fund_wallet(uid, 10)
    fund_wallet(uid, 20)
    fund_wallet(uid, 30)

    details = client.get(f"{API}/wallets/{uid}", params={"limit": 2}).json()
    assert details["balance"] == 60
    assert details["transaction_count"] == 3
    assert [t["amount"] for t in details["transactions"]] == [30, 20]
    assert [t["balance_after"] for t in details["transactions"]] == [60, 30]

    second_page = client.get(f"{API}/wallets/{uid}", params={"limit": 2, "skip": 2}).json()
    assert [t["amount"] for t in second_page["transactions"]] == [10]

    history = client.get(f"{API}/wallets/transactions/{uid}", params={"type": "credit"}).json()
    assert history["total_transactions"] == 3
    assert client.get(f"{API}/wallets/transactions/{uid}", params={"type": "debit"}).json()["transactions"] == []


def test_withdraw(client, fake_stripe, customer, fund_wallet):
    uid = customer["user"]["id"]
    payload = {"user_id": uid, "amount": 40, "bank_account_token": "ba_test_123"}

    broke = client.post(f"{API}/wallets/withdraw", json=payload)
    assert broke.status_code == 400
    assert broke.json()["detail"] == "Insufficient wallet balance"
    assert fake_stripe.payouts == []

    fund_wallet(uid, 100)
    r = client.post(f"{API}/wallets/withdraw", json=payload)
    assert r.status_code == 200
    assert r.json()["payout_id"] == "po_test_1"
    assert r.json()["new_balance"] == 60
    assert fake_stripe.payouts[0]["amount"] == 4000
    assert fake_stripe.payouts[0]["destination"] == "ba_test_123"

    wallet = client.get(f"{API}/wallets/balance/{uid}").json()
    assert wallet["total_spent"] == 40


def test_withdraw_bank_failure_keeps_balance(client, fake_stripe, customer, fund_wallet):
    uid = customer["user"]["id"]
    fund_wallet(uid, 100)
    fake_stripe.payout_error = "Insufficient funds in Stripe account"
    r = client.post(f"{API}/wallets/withdraw", json={"user_id": uid, "amount": 40, "bank_account_token": "ba_test"})
    assert r.status_code == 400
    assert r.json()["detail"].startswith("Bank transfer failed:")
    assert client.get(f"{API}/wallets/balance/{uid}").json()["balance"] == 100


def test_transaction_total_counts_whole_history(client, customer, fund_wallet):
    uid = customer["user"]["id"]
    for amount in (5, 6, 7):
        fund_wallet(uid, amount)

    history = client.get(f"{API}/wallets/transactions/{uid}", params={"limit": 1}).json()
    assert len(history["transactions"]) == 1
    assert history["transactions"][0]["amount"] == 7
    assert history["total_transactions"] == 3


def test_add_money_must_match_the_intent(client, fake_stripe, customer, register):
    uid = customer["user"]["id"]
    intent_id = client.post(f"{API}/wallets/topup-intent", json={"user_id": uid, "amount": 1}).json()["payment_intent_id"]
    fake_stripe.succeed(intent_id)

    inflated = client.post(
        f"{API}/wallets/add-money",
        json={"user_id": uid, "amount": 5000, "payment_intent_id": intent_id},
    )
    assert inflated.status_code == 400
    assert inflated.json()["detail"] == "Amount does not match the payment intent"

    other = register("Otto", "otto@example.com")
    stolen = client.post(
        f"{API}/wallets/add-money",
        json={"user_id": other["user"]["id"], "amount": 1, "payment_intent_id": intent_id},
    )
    assert stolen.status_code == 400
    assert client.get(f"{API}/wallets/balance/{uid}").json()["balance"] == 0
    assert client.get(f"{API}/wallets/balance/{other['user']['id']}").json()["balance"] == 0


def test_booking_payment_intent_cannot_fund_a_wallet(client, fake_stripe, booking, customer):
    intent = client.post(f"{API}/payments/create-intent", json={"booking_id": booking["id"], "amount": 100}).json()
    fake_stripe.succeed("pi_test_1")
    r = client.post(
        f"{API}/wallets/add-money",
        json={"user_id": customer["user"]["id"], "amount": 100, "payment_intent_id": "pi_test_1"},
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Payment intent is not a top-up for this wallet"
    assert client.get(f"{API}/payments/{intent['payment_id']}").json()["status"] == "pending"
