"""Canonical identifier discovery for backend records.

The backend does not hand out a stable identifier with every response: list
rows sometimes lack ``id`` and updates are keyed by passport or application
number depending on the deployment. Both the update fallback chain and row id
recovery go through here so the list scan lives in one place.
"""

from .api_client import ApiError, as_list
from . import listing


class IdentifierResolver:
    def __init__(self, client):
        self.client = client

    def find_by_passport(self, passport):
        if not passport:
            return None
        for row in as_list(self.client.list_applicants()):
            if listing.passport_no(row) == passport:
                return row
        return None

    def resolve_applicant_id(self, row):
        """Id of ``row``, re-fetching the collection when the row lacks one."""
        found = listing.applicant_id(row)
        if found is not None:
            return found
        match = self.find_by_passport(listing.passport_no(row))
        return listing.applicant_id(match) if match else None

    def resolve_user_id(self, username):
        """Backend id of ``username`` from the users directory, then partners."""
        if not username:
            return None
        last_error = None
        for fetch in (self.client.list_users, self.client.list_partners):
            try:
                rows = as_list(fetch())
            except ApiError as e:
                last_error = e
                continue
            for row in rows:
                if isinstance(row, dict) and row.get("username") == username and row.get("id") is not None:
                    return row["id"]
        if last_error is not None:
            raise last_error
        return None

    def update_applicant(self, payload, original_passport=None, application_no=None):
        """Try each known identifier in turn, then discover one from the list.

        Returns the successful `ApiResult`; raises `ApiError` with the last
        failure when nothing works.
        """
        tried = []
        last_error = None
        for identifier in (original_passport, application_no):
            if not identifier or identifier in tried:
                continue
            tried.append(identifier)
            result = self.client.update_applicant(identifier, payload)
            if result.ok:
                return result
            last_error = ApiError(result.message or "Failed to update", result.status, result.payload)

        try:
            passport = (payload.get("applicant") or {}).get("passport_no") or original_passport
            match = self.find_by_passport(passport)
        except ApiError as e:
            match = None
            last_error = e

        if match:
            for identifier in (listing.field(match, "application_no"), listing.applicant_id(match)):
                if identifier is None or identifier in tried:
                    continue
                tried.append(identifier)
                result = self.client.update_applicant(identifier, payload)
                if result.ok:
                    return result
                last_error = ApiError(result.message or "Failed to update", result.status, result.payload)

        raise last_error or ApiError("Applicant not found for update")
