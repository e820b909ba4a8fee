# --- Purpose -------------------------------------------------------------------
# In-memory conversations for the chat screens.
#
# WHAT this module does
# - `ChatMessage`: one chat bubble (user or assistant), immutable.
# - `Conversation`: ordered, append-only list of messages for one chat, plus the
#    simulated assistant reply that arrives `reply_delay` seconds after a send.
# - `ConversationStore`: the fixed set of conversations shown in the chat list.
#
# HOW it works
# - `Conversation` is a Kivy EventDispatcher: every appended message is announced
#   through `on_message`, so screens can `bind(on_message=...)` and add a bubble.
# - The reply is scheduled with `Clock.schedule_once`, which runs the callback on
#   the Kivy main thread (same thread as the send), so no locking is needed.

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from kivy.clock import Clock
from kivy.event import EventDispatcher
from kivy.logger import Logger
from kivy.properties import NumericProperty

REPLY_DELAY = 1.0
CONVERSATION_COUNT = 5
SIMULATED_REPLY = (
    "This is a simulated AI response. "
    "In the future, this will be replaced with actual API calls."
)


@dataclass(frozen=True)
class ChatMessage:
    """A single chat bubble."""

    content: str
    is_user: bool
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)


class Conversation(EventDispatcher):
    """One chat thread.

    `scheduler` must behave like `Clock.schedule_once(callback, timeout)`; the
    callback receives the elapsed time as its only argument.
    """

    __events__ = ('on_message',)

    chat_id = NumericProperty(0)
    reply_delay = NumericProperty(REPLY_DELAY)

    def __init__(self, scheduler=None, **kwargs):
        super().__init__(**kwargs)
        self.messages = []
        self.pending_replies = 0
        self._schedule = scheduler or Clock.schedule_once

    @property
    def title(self):
        return f"Chat {self.chat_id}"

    def send(self, text):
        """Append a user message and schedule the assistant reply.

        Empty text is ignored and `None` is returned. Anything else,
        whitespace included, is stored as typed.
        """
        if not text:
            return None
        message = self._append(text, is_user=True)
        self.pending_replies += 1
        Logger.debug(f"LlamaChat: reply for {self.title} in {self.reply_delay}s")
        self._schedule(self._deliver_reply, self.reply_delay)
        return message

    def _deliver_reply(self, dt):
        self.pending_replies -= 1
        self._append(SIMULATED_REPLY, is_user=False)

    def _append(self, content, is_user):
        message = ChatMessage(content=content, is_user=is_user)
        self.messages.append(message)
        Logger.debug(
            f"LlamaChat: {self.title} +{'user' if is_user else 'assistant'} "
            f"message ({len(self.messages)} total)"
        )
        self.dispatch('on_message', message)
        return message

    def on_message(self, message):
        pass


class ConversationStore:
    """The fixed list of conversations, keyed by id `1..count`."""

    def __init__(self, count=CONVERSATION_COUNT, reply_delay=REPLY_DELAY, scheduler=None):
        self.count = count
        self.reply_delay = reply_delay
        self._scheduler = scheduler
        self.reset()

    def reset(self):
        """Replace every conversation with an empty one.

        Replies still pending for the old conversations land in the discarded
        objects and are never seen again.
        """
        self._conversations = {
            chat_id: Conversation(
                chat_id=chat_id, reply_delay=self.reply_delay, scheduler=self._scheduler
            )
            for chat_id in range(1, self.count + 1)
        }

    def get(self, chat_id):
        # unknown ids raise KeyError
        return self._conversations[chat_id]

    def __iter__(self):
        return iter(self._conversations.values())

    def __len__(self):
        return len(self._conversations)
