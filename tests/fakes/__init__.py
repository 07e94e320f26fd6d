"""Test fakes and builders for sessions and workspaces.

Example:
    from tests.fakes import make_session

    call = make_session("S1", destination_number="9100", duration="00:02:00")
    sms = make_session("S2", kind=SessionKind.SMS)
"""

from .sessions import make_session, sample_sessions

__all__ = ["make_session", "sample_sessions"]
