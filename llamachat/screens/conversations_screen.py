# --- Purpose -------------------------------------------------------------------
# The "Chats" page: one list row per conversation. Tapping a row asks the app to
# open that conversation on the chat screen.

# screens/conversations_screen.py
from kivymd.uix.list import IconLeftWidget, OneLineIconListItem
from kivymd.uix.screen import MDScreen


class ConversationsScreen(MDScreen):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.name = 'conversations_screen'

    def populate(self, conversations, on_select):
        """Fill the list with one row per conversation.

        `on_select(chat_id)` is called when a row is released.
        """
        conversation_list = self.ids.conversation_list
        conversation_list.clear_widgets()
        for conversation in conversations:
            item = OneLineIconListItem(
                IconLeftWidget(icon="chat"),
                text=conversation.title,
                on_release=lambda x, chat_id=conversation.chat_id: on_select(chat_id),
            )
            conversation_list.add_widget(item)
