"""
Book Store Lifecycle Module - API orchestration for the DemoQA Book Store
Drives the full user lifecycle (create user, generate token, list books,
add a book, delete the book, delete the user) and threads the derived
user id, token and ISBN from one call to the next.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from playwright.sync_api import APIRequestContext, APIResponse

logger = logging.getLogger(__name__)

USER_PATH = "/Account/v1/User"
TOKEN_PATH = "/Account/v1/GenerateToken"
BOOKS_PATH = "/BookStore/v1/Books"
BOOK_PATH = "/BookStore/v1/Book"


class LifecycleError(AssertionError):
    """Base class for a failed lifecycle step."""

    def __init__(self, step: str, message: str):
        super().__init__(f"{step}: {message}")
        self.step = step


class UnexpectedStatus(LifecycleError):
    def __init__(self, step: str, status: int, expected: Iterable[int]):
        self.status = status
        self.expected = tuple(expected)
        super().__init__(step, f"status {status}, expected one of {self.expected}")


class MissingField(LifecycleError):
    def __init__(self, step: str, field_name: str):
        self.field = field_name
        super().__init__(step, f"response has no '{field_name}'")


class EmptyCollection(LifecycleError):
    def __init__(self, step: str):
        super().__init__(step, "listing returned no books")


class AssociationNotConfirmed(LifecycleError):
    def __init__(self, step: str, isbn: str):
        self.isbn = isbn
        super().__init__(step, f"ISBN {isbn} not in the user's books")


class StateNotReady(LifecycleError):
    def __init__(self, step: str, field_name: str):
        self.field = field_name
        super().__init__(step, f"'{field_name}' is not set yet")


@dataclass
class SessionState:
    """Identifiers produced by earlier steps, read by later ones."""

    auth_token: Optional[str] = None
    user_id: Optional[str] = None
    selected_isbn: Optional[str] = None

    def require(self, name: str, step: str) -> str:
        value = getattr(self, name)
        if not value:
            raise StateNotReady(step, name)
        return value


@dataclass
class StepResult:
    step: str
    status: int
    body: Dict[str, Any] = field(default_factory=dict)
    ok: bool = False


def _parse_body(response: APIResponse) -> Dict[str, Any]:
    # DELETE answers 204 with an empty body
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _isbn_of(book: Any) -> Optional[str]:
    return book.get("isbn") if isinstance(book, dict) else None


class BookStoreLifecycle:
    """
    One lifecycle run against the Book Store API.

    Each instance owns its own SessionState; do not share an instance
    between runs.
    """

    def __init__(self, request_context: APIRequestContext, base_url: str,
                 credentials: Dict[str, str]):
        """
        Args:
            request_context: Playwright API request context
            base_url: DemoQA root URL
            credentials: Account payload, {"userName": ..., "password": ...}
        """
        self.request_context = request_context
        self.base_url = base_url.rstrip("/")
        self.credentials = dict(credentials)
        self.state = SessionState()
        self.results: List[StepResult] = []
        self.user_deleted = False

    # ---------------------------- plumbing ----------------------------

    def _headers(self, step: str, auth: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if auth:
            token = self.state.require("auth_token", step)
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _send(self, step: str, method: str, path: str, expected: Iterable[int],
              data: Optional[Dict[str, Any]] = None, auth: bool = True) -> StepResult:
        """
        Issue one request and check its status.

        Args:
            step: Step name used in logs and errors
            method: "get", "post" or "delete"
            path: Path below the base URL
            expected: Accepted status codes
            data: JSON body, if any
            auth: Send the bearer token

        Returns:
            StepResult: status, parsed body and ok flag
        """
        expected = tuple(expected)
        headers = self._headers(step, auth)
        send = getattr(self.request_context, method)
        url = f"{self.base_url}{path}"

        if data is None:
            response = send(url, headers=headers)
        else:
            response = send(url, headers=headers, data=data)

        result = StepResult(
            step=step,
            status=response.status,
            body=_parse_body(response),
            ok=response.status in expected,
        )
        self.results.append(result)

        if not result.ok:
            logger.error("%s failed with status %s: %s", step, result.status, result.body)
            raise UnexpectedStatus(step, result.status, expected)
        return result

    # ------------------------------ steps ------------------------------

    def create_user(self) -> StepResult:
        """Create the test user and store its userID."""
        step = "create_user"
        result = self._send(step, "post", USER_PATH, (201,),
                            data=self.credentials,
                            auth=False)

        user_id = result.body.get("userID")
        if not user_id:
            raise MissingField(step, "userID")
        self.state.user_id = user_id
        logger.info("User created: %s (ID: %s)", result.body.get("username"), user_id)
        return result

    def issue_token(self) -> StepResult:
        """Generate a token for the test user."""
        step = "issue_token"
        result = self._send(step, "post", TOKEN_PATH, (200,),
                            data=self.credentials,
                            auth=False)

        token = result.body.get("token")
        if not token:
            raise MissingField(step, "token")
        self.state.auth_token = token
        logger.info("Token issued for %s", self.credentials.get("userName"))
        return result

    def list_resources(self) -> StepResult:
        """List books and select the first one's ISBN."""
        step = "list_resources"
        result = self._send(step, "get", BOOKS_PATH, (200,))

        if "books" not in result.body:
            raise MissingField(step, "books")
        books = result.body["books"]
        if not books:
            raise EmptyCollection(step)

        isbn = _isbn_of(books[0])
        if not isbn:
            raise MissingField(step, "isbn")
        self.state.selected_isbn = isbn
        logger.info("Fetched %d books. Sample ISBN: %s", len(books), isbn)
        return result

    def attach_resource(self) -> StepResult:
        """Add the selected book to the user and confirm it shows up."""
        step = "attach_resource"
        user_id = self.state.require("user_id", step)
        isbn = self.state.require("selected_isbn", step)

        result = self._send(step, "post", BOOKS_PATH, (201,),
                            data={"userId": user_id, "collectionOfIsbns": [{"isbn": isbn}]})

        books = result.body.get("books") or []
        if not any(_isbn_of(book) == isbn for book in books):
            raise AssociationNotConfirmed(step, isbn)
        logger.info("Book with ISBN %s added to user %s", isbn, user_id)
        return result

    def detach_resource(self) -> StepResult:
        """Remove the selected book from the user."""
        step = "detach_resource"
        user_id = self.state.require("user_id", step)
        isbn = self.state.require("selected_isbn", step)

        result = self._send(step, "delete", BOOK_PATH, (200, 204),
                            data={"isbn": isbn, "userId": user_id})
        logger.info("Book with ISBN %s deleted", isbn)
        return result

    def delete_user(self) -> StepResult:
        """Delete the test user."""
        step = "delete_user"
        user_id = self.state.require("user_id", step)

        result = self._send(step, "delete", f"{USER_PATH}/{user_id}", (200, 204))
        self.user_deleted = True
        logger.info("User with ID %s deleted", user_id)
        return result

    # --------------------------- composites ---------------------------

    def setup(self) -> None:
        """Create the user and issue its token. Nothing to clean up on failure."""
        self.create_user()
        self.issue_token()

    def cleanup(self) -> None:
        """Best-effort user deletion; logs instead of raising."""
        if self.user_deleted or not self.state.user_id:
            return
        try:
            self.delete_user()
        except Exception:
            logger.warning("Cleanup failed for user %s", self.state.user_id, exc_info=True)

    def run(self) -> List[StepResult]:
        """
        Run the whole lifecycle.

        If listing, adding or deleting the book fails, the user is still
        deleted and the original error is raised.

        Returns:
            list: the StepResult of every step, in order
        """
        self.setup()
        try:
            self.list_resources()
            self.attach_resource()
            self.detach_resource()
        except Exception:
            self.cleanup()
            raise
        self.delete_user()
        return self.results
