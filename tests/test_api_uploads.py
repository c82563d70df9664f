from conftest import PNG_BYTES, register, signup


def _registered_proof(client):
    r = register(client, proof=("proof.png", PNG_BYTES, "image/png"))
    assert r.status_code == 200, r.text
    return r.json()["team"]["paymentProofPath"]


def test_owner_and_admin_can_read_proof(user_client, admin_client, registration_open):
    filename = _registered_proof(user_client)

    r = user_client.get(f"/uploads/{filename}")
    assert r.status_code == 200
    assert r.content == PNG_BYTES

    assert admin_client.get(f"/uploads/{filename}").status_code == 200


def test_other_user_is_forbidden(user_client, make_client, registration_open):
    filename = _registered_proof(user_client)

    other = make_client()
    signup(other, email="other@x.com")
    r = other.get(f"/uploads/{filename}")
    assert r.status_code == 403
    assert r.json()["detail"] == "Access denied"


def test_anonymous_is_unauthorized(user_client, client, registration_open):
    filename = _registered_proof(user_client)
    assert client.get(f"/uploads/{filename}").status_code == 401


def test_guessing_other_names_is_forbidden(user_client, registration_open):
    _registered_proof(user_client)
    assert user_client.get("/uploads/paymentProof-1-deadbeef.png").status_code == 403


def test_admin_missing_file_is_404(admin_client):
    assert admin_client.get("/uploads/paymentProof-1-missing.png").status_code == 404
