"""
Tests for the transfer initiation workflow: ordering of upload and create,
notification titles, and form state after each outcome.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from land_registry.domains.documents import DocumentFile
from land_registry.services.notifications import RecordingNotifier
from land_registry.services.stores import TransferStore
from land_registry.services.submission import IN_PROGRESS_MESSAGE, SubmissionState
from land_registry.services.transfer_submission import TransferSubmission

CONTRACT_URL = "https://res.cloudinary.com/demo/contract.pdf"
USER = {"id": "user-123", "email": "test@example.com", "full_name": "Test User"}
LANDS = [
    {"id": "1", "parcel_id": 12345, "size": 1000, "ownership_type": "Individual", "status": "Approved"},
    {"id": "2", "parcel_id": 67890, "size": 2000, "ownership_type": "Corporate", "status": "Approved"},
]


@pytest.fixture
def contract() -> DocumentFile:
    return DocumentFile("contract.pdf", b"%PDF-1.4 test contract", "application/pdf")


@pytest.fixture
def auth() -> MagicMock:
    store = MagicMock()
    store.user = dict(USER)
    return store


@pytest.fixture
def lands() -> MagicMock:
    store = MagicMock()
    store.lands = list(LANDS)
    return store


@pytest.fixture
def transfers() -> MagicMock:
    store = MagicMock()
    store.upload_contract_document.return_value = {"success": True, "url": CONTRACT_URL}
    store.create_transfer.return_value = {"success": True, "data": {"id": "t1", "status": "Pending"}}
    return store


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def workflow(auth, lands, transfers, notifier) -> TransferSubmission:
    return TransferSubmission(auth, lands, transfers, notifier)


def _fill(workflow: TransferSubmission, contract: DocumentFile) -> None:
    workflow.set_field("parcel_id", 12345)
    workflow.set_field("recipient_name", "Jane Smith")
    workflow.attach_document(contract)


def test_successful_transfer(workflow, transfers, notifier, contract) -> None:
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": True, "data": {"id": "t1", "status": "Pending"}}
    transfers.upload_contract_document.assert_called_once_with(contract, "user-123")
    transfers.create_transfer.assert_called_once_with({
        "parcel_id": 12345,
        "recipient_name": "Jane Smith",
        "contract_document_url": CONTRACT_URL,
        "status": "Pending",
    })
    assert notifier.history == [{
        "kind": "success",
        "title": "Transfer initiated",
        "body": "Your transfer request has been submitted successfully",
    }]
    assert workflow.state is SubmissionState.SUCCEEDED
    # form is cleared after success
    assert workflow.values == {"parcel_id": None, "recipient_name": None}
    assert workflow.document is None
    assert workflow.errors == {}


def test_upload_happens_before_create(workflow, transfers, contract) -> None:
    calls: list[str] = []
    transfers.upload_contract_document.side_effect = lambda *a: calls.append("upload") or {
        "success": True, "url": CONTRACT_URL,
    }
    transfers.create_transfer.side_effect = lambda *a: calls.append("create") or {"success": True, "data": {}}
    _fill(workflow, contract)

    workflow.submit()

    assert calls == ["upload", "create"]


def test_requires_signed_in_user(workflow, auth, transfers, notifier, contract) -> None:
    auth.user = None
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "You must be logged in to initiate a transfer"}
    assert notifier.last == {
        "kind": "error",
        "title": "Authentication error",
        "body": "You must be logged in to initiate a transfer",
    }
    transfers.upload_contract_document.assert_not_called()
    transfers.create_transfer.assert_not_called()
    assert workflow.state is SubmissionState.FAILED


def test_upload_failure_skips_create(workflow, transfers, notifier, contract) -> None:
    transfers.upload_contract_document.return_value = {"success": False, "error": "Upload failed"}
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "Upload failed"}
    assert notifier.last == {"kind": "error", "title": "Transfer failed", "body": "Upload failed"}
    transfers.create_transfer.assert_not_called()
    # input is kept for a retry
    assert workflow.values["recipient_name"] == "Jane Smith"
    assert workflow.document is contract


def test_upload_exception_is_reported(workflow, transfers, notifier, contract) -> None:
    transfers.upload_contract_document.side_effect = ConnectionError("Network error")
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "Network error"}
    assert notifier.last["title"] == "Transfer failed"
    assert notifier.last["body"] == "Network error"
    transfers.create_transfer.assert_not_called()


def test_create_failure_is_reported(workflow, transfers, notifier, contract) -> None:
    transfers.create_transfer.return_value = {"success": False, "error": "Transfer creation failed"}
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "Transfer creation failed"}
    assert notifier.last == {"kind": "error", "title": "Transfer failed", "body": "Transfer creation failed"}
    transfers.upload_contract_document.assert_called_once()
    assert workflow.state is SubmissionState.FAILED
    assert workflow.last_error == "Transfer creation failed"


def test_create_exception_is_reported(workflow, transfers, notifier, contract) -> None:
    transfers.create_transfer.side_effect = TimeoutError("Network timeout")
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "Network timeout"}
    assert notifier.last == {"kind": "error", "title": "Transfer failed", "body": "Network timeout"}


def test_validation_errors_block_upload(workflow, transfers, notifier) -> None:
    workflow.set_field("recipient_name", "Jo")

    out = workflow.submit()

    assert out["success"] is False
    assert workflow.errors == {
        "parcel_id": "Parcel ID is required",
        "recipient_name": "Recipient name must be at least 3 characters",
        "contract_document": "Contract document is required",
    }
    assert notifier.last["title"] == "Validation error"
    assert notifier.last["body"] == "Parcel ID is required"
    transfers.upload_contract_document.assert_not_called()


def test_attach_document_validates_immediately(workflow) -> None:
    too_big = DocumentFile("big.pdf", b"x" * (6 * 1024 * 1024), "application/pdf")
    assert workflow.attach_document(too_big) == "File size must be less than 5MB"
    assert workflow.errors["contract_document"] == "File size must be less than 5MB"

    text = DocumentFile("notes.txt", b"hi", "text/plain")
    assert workflow.attach_document(text) == "Only PDF, JPEG, and PNG files are allowed"

    assert workflow.attach_document(DocumentFile("ok.png", b"png", "image/png")) is None
    assert "contract_document" not in workflow.errors


def test_set_field_clears_its_error(workflow) -> None:
    workflow.submit()
    assert "recipient_name" in workflow.errors
    workflow.set_field("recipient_name", "Jane Smith")
    assert "recipient_name" not in workflow.errors
    with pytest.raises(KeyError):
        workflow.set_field("owner_id", "x")


def test_busy_during_upload_and_create(workflow, transfers, contract) -> None:
    seen: list[tuple[bool, dict]] = []

    def upload(*args):
        seen.append((workflow.busy, workflow.submit()))
        return {"success": True, "url": CONTRACT_URL}

    def create(*args):
        seen.append((workflow.busy, workflow.submit()))
        return {"success": True, "data": {"id": "t1"}}

    transfers.upload_contract_document.side_effect = upload
    transfers.create_transfer.side_effect = create
    _fill(workflow, contract)

    assert workflow.busy is False
    assert workflow.submit()["success"] is True
    assert workflow.busy is False

    assert seen == [
        (True, {"success": False, "error": IN_PROGRESS_MESSAGE}),
        (True, {"success": False, "error": IN_PROGRESS_MESSAGE}),
    ]
    assert transfers.upload_contract_document.call_count == 1
    assert transfers.create_transfer.call_count == 1


def test_reset_clears_form(workflow, contract) -> None:
    _fill(workflow, contract)
    workflow.submit()
    _fill(workflow, contract)

    workflow.reset()

    assert workflow.values == {"parcel_id": None, "recipient_name": None}
    assert workflow.document is None
    assert workflow.state is SubmissionState.IDLE


def test_parcel_options_come_from_land_store(workflow) -> None:
    assert workflow.parcel_options() == [
        (12345, "Parcel ID: 12345 - Size: 1000 sq m"),
        (67890, "Parcel ID: 67890 - Size: 2000 sq m"),
    ]


def test_with_real_transfer_store(auth, lands, notifier, contract) -> None:
    client = MagicMock()
    created = {"id": "t9", "parcel_id": 67890, "recipient_name": "Jane Smith", "status": "Pending"}
    client.insert.return_value = {"data": created, "error": None}
    uploader = MagicMock(return_value={"success": True, "url": CONTRACT_URL})
    store = TransferStore(client, uploader)
    workflow = TransferSubmission(auth, lands, store, notifier)

    workflow.set_field("parcel_id", "67890")
    workflow.set_field("recipient_name", "Jane Smith")
    workflow.attach_document(contract)
    out = workflow.submit()

    assert out == {"success": True, "data": created}
    uploader.assert_called_once_with(contract, "user-123", "contract")
    client.insert.assert_called_once_with("transfers", {
        "parcel_id": 67890,
        "recipient_name": "Jane Smith",
        "contract_document_url": CONTRACT_URL,
        "status": "Pending",
    })
    assert store.transfers == [created]
    assert store.loading is False


def test_disallowed_contract_type_makes_no_remote_calls(workflow, transfers, notifier) -> None:
    workflow.set_field("parcel_id", 12345)
    workflow.set_field("recipient_name", "Jane Smith")
    workflow.attach_document(DocumentFile("contract.txt", b"plain", "text/plain"))

    out = workflow.submit()

    assert out == {"success": False, "error": "Only PDF, JPEG, and PNG files are allowed"}
    assert notifier.last["title"] == "Validation error"
    transfers.upload_contract_document.assert_not_called()
    transfers.create_transfer.assert_not_called()


def test_upload_without_url_skips_create(workflow, transfers, notifier, contract) -> None:
    transfers.upload_contract_document.return_value = {"success": True, "url": None}
    _fill(workflow, contract)

    out = workflow.submit()

    assert out == {"success": False, "error": "Upload failed: no document URL returned"}
    assert notifier.last["title"] == "Transfer failed"
    transfers.create_transfer.assert_not_called()
    assert workflow.state is SubmissionState.FAILED
