# --- Purpose -------------------------------------------------------------------
# The local "logged in" state: a username and a flag, nothing is checked against
# a server. Both values are kept in a Kivy JsonStore so they survive a restart.

import os

from kivy.event import EventDispatcher
from kivy.logger import Logger
from kivy.properties import BooleanProperty, StringProperty
from kivy.storage.jsonstore import JsonStore

SESSION_KEY = "session"
SESSION_FILENAME = "session.json"


def open_session_store(path):
    """Open the JsonStore at `path`, starting over if the file is corrupt."""
    try:
        return JsonStore(path)
    except ValueError as e:
        Logger.warning(f"LlamaChat: discarding unreadable session file {path}: {e}")
        os.remove(path)
        return JsonStore(path)


class UserSession(EventDispatcher):
    username = StringProperty("")
    is_logged_in = BooleanProperty(False)

    def __init__(self, store=None, **kwargs):
        super().__init__(**kwargs)
        self._store = store
        self.restore()

    def restore(self):
        if self._store is None or not self._store.exists(SESSION_KEY):
            return
        data = self._store.get(SESSION_KEY)
        self.username = data.get("username", "")
        self.is_logged_in = bool(data.get("is_logged_in", False))

    def login(self, username):
        """Log in as `username`. Returns False (and changes nothing) when empty."""
        if not username:
            return False
        # username first: observers of is_logged_in read it
        self.username = username
        self.is_logged_in = True
        self._save()
        Logger.info(f"LlamaChat: logged in as {username}")
        return True

    def logout(self):
        self.username = ""
        self.is_logged_in = False
        self._save()
        Logger.info("LlamaChat: logged out")

    def _save(self):
        if self._store is not None:
            self._store.put(SESSION_KEY, username=self.username, is_logged_in=self.is_logged_in)
