"""
Input helpers, account variants and password hashing.
"""
import pytest
from fastapi import HTTPException

from backend.app.schemas.account import Admin, Applicant, Employer, parse_account
from backend.app.utils.security import hash_password, verify_password
from backend.app.utils.validation import (
    as_string_list,
    coerce_number,
    is_bare_filename,
    is_blank,
    sanitize_filename,
    validate_email,
    validate_job_status,
    validate_password,
    validate_role,
)


class TestEmailValidation:
    def test_valid_email(self):
        assert validate_email("test@example.com") == "test@example.com"
        assert validate_email("  USER@EXAMPLE.COM ") == "user@example.com"

    @pytest.mark.parametrize("email", ["", "invalid", "testexample.com", "a@b", "a" * 250 + "@test.com"])
    def test_invalid_email(self, email):
        with pytest.raises(HTTPException) as exc:
            validate_email(email)
        assert exc.value.status_code == 400


class TestPasswordValidation:
    def test_any_non_empty_password(self):
        validate_password("x")

    @pytest.mark.parametrize("password", ["", None, "é" * 37])
    def test_rejected(self, password):
        with pytest.raises(HTTPException) as exc:
            validate_password(password)
        assert exc.value.status_code == 400


class TestRoleAndStatus:
    @pytest.mark.parametrize("role", ["user", "employer", "admin"])
    def test_valid_roles(self, role):
        assert validate_role(role) == role

    def test_missing_role_defaults_to_user(self):
        assert validate_role(None) == "user"

    @pytest.mark.parametrize("role", ["", "Employer", "recruiter", 3])
    def test_invalid_roles(self, role):
        with pytest.raises(HTTPException) as exc:
            validate_role(role)
        assert exc.value.status_code == 400

    def test_job_status(self):
        assert validate_job_status(None) == "active"
        assert validate_job_status("expired") == "expired"
        with pytest.raises(HTTPException):
            validate_job_status("deleted")


class TestAccountVariants:
    def test_applicant(self):
        account = parse_account("user", "Ignored")
        assert isinstance(account, Applicant)
        assert account.company_name is None

    def test_admin(self):
        account = parse_account("admin", None)
        assert isinstance(account, Admin)
        assert account.company_name is None

    def test_employer_keeps_trimmed_company(self):
        account = parse_account("employer", "  Acme  ")
        assert isinstance(account, Employer)
        assert account.company_name == "Acme"

    @pytest.mark.parametrize("company", [None, "", "   "])
    def test_employer_needs_company(self, company):
        with pytest.raises(HTTPException) as exc:
            parse_account("employer", company)
        assert exc.value.status_code == 400
        assert "Company name" in exc.value.detail

    def test_role_checked_before_company(self):
        with pytest.raises(HTTPException) as exc:
            parse_account("boss", None)
        assert "role" in exc.value.detail.lower()


class TestCoercion:
    def test_is_blank(self):
        assert is_blank(None)
        assert is_blank("  ")
        assert is_blank([])
        assert is_blank({})
        assert not is_blank(0)
        assert not is_blank(["x"])

    def test_as_string_list(self):
        assert as_string_list("Remote") == ["Remote"]
        assert as_string_list([" a ", "", None, "b"]) == ["a", "b"]
        assert as_string_list(None) == []

    @pytest.mark.parametrize("value,expected", [(0, 0.0), ("12", 12.0), (" 3.5 ", 3.5), (7, 7.0)])
    def test_numbers(self, value, expected):
        assert coerce_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "x", True, False, -1, "-0.5", float("nan"), {"a": 1}])
    def test_not_numbers(self, value):
        assert coerce_number(value) is None


class TestFilenames:
    def test_sanitize_filename(self):
        assert sanitize_filename("../../etc/passwd") == "____etc_passwd"
        assert sanitize_filename("cv.pdf") == "cv.pdf"
        assert sanitize_filename(".hidden.pdf") == "hidden.pdf"

    @pytest.mark.parametrize("name", ["", "..", "_"])
    def test_sanitize_rejects_empty_results(self, name):
        with pytest.raises(HTTPException):
            sanitize_filename(name)

    def test_is_bare_filename(self):
        assert is_bare_filename("1700000000000-cv.pdf")
        for bad in ("", ".", "..", "a/b", "a\\b", "x\x00y"):
            assert not is_bare_filename(bad)


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_against_non_bcrypt_value(self):
        assert not verify_password("s3cret!", "plaintext")

    def test_hash_rejects_oversized(self):
        with pytest.raises(ValueError):
            hash_password("a" * 73)
