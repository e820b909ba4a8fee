# --- High-level overview -------------------------------------------------------
# This is the Kivy/KivyMD app entry point for Llama Chat.
# It wires together:
#   - UI screens (welcome/login, conversation list, chat)
#   - the local session (username + logged-in flag, kept in a JsonStore)
#   - the in-memory conversations and their simulated assistant replies
#   - the top menu, dialogs and toasts

# python core modules
import os
# KIVY_GL_BACKEND selects the graphics backend before Kivy initializes its window.
os.environ.setdefault('KIVY_GL_BACKEND', 'sdl2')

# kivy & kivymd imports
from kivy.core.window import Window
from kivy.lang import Builder
from kivy.properties import ObjectProperty
from kivy.metrics import dp, sp
from kivy.resources import resource_add_path
from kivy.core.clipboard import Clipboard
from kivy.logger import Logger
from kivymd.app import MDApp
from kivymd.uix.menu import MDDropdownMenu
from kivymd.uix.label import MDLabel
from kivymd.uix.button import MDFlatButton
from kivymd.uix.dialog import MDDialog

# Keep the focused input visible by pushing content above the soft keyboard.
Window.softinput_mode = "below_target"

# Screen classes must be imported before the KV files reference them.
from llamachat.screens.welcome_screen import WelcomeScreen
from llamachat.screens.conversations_screen import ConversationsScreen
from llamachat.screens.chat_screen import ChatScreen

from llamachat.chat import ConversationStore, REPLY_DELAY
from llamachat.session import UserSession, open_session_store, SESSION_FILENAME

## Global definitions
__version__ = "0.1.0"
# The KV resources ship as package data next to this module.
base_path = os.path.dirname(os.path.abspath(__file__))
kv_file_path = os.path.join(base_path, 'main_layout.kv')
kv_files_dir = os.path.join(base_path, 'kv_files')
# Lets `#:include <name>.kv` in main_layout.kv find the screen layouts.
resource_add_path(kv_files_dir)

## The APP definitions
class LlamaChatApp(MDApp):
    title = "Llama Chat"
    session = ObjectProperty(None)
    conversations = ObjectProperty(None)
    top_menu = ObjectProperty()

    def build_config(self, config):
        # Written to llamachat.ini on first run; edit it to tune the reply delay.
        config.setdefaults('chat', {
            'reply_delay': REPLY_DELAY,
        })

    def get_application_config(self):
        return super().get_application_config(
            os.path.join(self.user_data_dir, '%(appname)s.ini')
        )

    def build(self):
        self.theme_cls.primary_palette = "DeepPurple"
        self.theme_cls.accent_palette = "Blue"
        self.theme_cls.theme_style = "Light"
        self.session = UserSession(
            store=open_session_store(os.path.join(self.user_data_dir, SESSION_FILENAME))
        )
        self.conversations = ConversationStore(
            reply_delay=self.config.getfloat('chat', 'reply_delay')
        )
        # Top menu definition with action mapping used in on_start.
        self.top_menu_items = {
            "About": {
                "icon": "information-outline",
                "action": "about",
            },
            "Log out": {
                "icon": "logout",
                "action": "logout",
            },
        }
        return Builder.load_file(kv_file_path)

    def on_start(self):
        menu_items = [
            {
                "text": menu_key,
                "leading_icon": self.top_menu_items[menu_key]["icon"],
                "on_release": lambda x=menu_key: self.top_menu_callback(x),
                "font_size": sp(18),
            } for menu_key in self.top_menu_items
        ]
        self.top_menu = MDDropdownMenu(
            items=menu_items,
            width_mult=4,
        )
        self.root.get_screen('conversations_screen').populate(
            self.conversations, self.open_conversation
        )
        self.session.bind(is_logged_in=self.switch_login_screen)
        self.root.transition.direction = 'left'
        self.root.current = (
            'conversations_screen' if self.session.is_logged_in else 'welcome_screen'
        )
        Logger.info(
            f"LlamaChat: started, {'logged in as ' + self.session.username if self.session.is_logged_in else 'logged out'}"
        )

    def menu_bar_callback(self, button):
        # Anchor the dropdown to the pressed app-bar button and show it.
        self.top_menu.caller = button
        self.top_menu.open()

    def txt_dialog_closer(self, instance):
        self.txt_dialog.dismiss()

    def top_menu_callback(self, text_item):
        self.top_menu.dismiss()
        action = self.top_menu_items[text_item]["action"]
        if action == "about":
            buttons = [
                MDFlatButton(
                    text="Close",
                    theme_text_color="Custom",
                    text_color=self.theme_cls.primary_color,
                    on_release=self.txt_dialog_closer
                ),
            ]
            self.show_text_dialog(
                "Llama Chat",
                f"Version {__version__}\nSigned in as {self.session.username}",
                buttons
            )
        elif action == "logout":
            buttons = [
                MDFlatButton(
                    text="Cancel",
                    theme_text_color="Custom",
                    text_color=self.theme_cls.primary_color,
                    on_release=self.txt_dialog_closer
                ),
                MDFlatButton(
                    text="Log out",
                    theme_text_color="Custom",
                    text_color="red",
                    on_release=self.logout
                ),
            ]
            self.show_text_dialog("Log out", "You will return to the welcome screen.", buttons)

    def show_toast_msg(self, message, is_error=False):
        # Shows a transient snackbar-style message at the bottom of the screen.
        from kivymd.uix.snackbar import MDSnackbar
        bg_color = (0.2, 0.6, 0.2, 1) if not is_error else (0.8, 0.2, 0.2, 1)
        MDSnackbar(
            MDLabel(
                text = message,
                font_style = "Subtitle1"
            ),
            md_bg_color=bg_color,
            y=dp(24),
            pos_hint={"center_x": 0.5},
            duration=2
        ).open()

    def show_text_dialog(self, title, text="", buttons=None):
        # Keep a reference in self.txt_dialog so button handlers can dismiss it.
        self.txt_dialog = MDDialog(
            title=title,
            text=text,
            buttons=buttons or []
        )
        self.txt_dialog.open()

    def login(self, username_widget):
        # Screen switching happens in switch_login_screen once the flag flips.
        if self.session.login(username_widget.text):
            username_widget.text = ""
        else:
            self.show_toast_msg("Please enter a username!", is_error=True)

    def logout(self, instance=None):
        if getattr(self, 'txt_dialog', None):
            self.txt_dialog.dismiss()
        self.session.logout()
        # the next user starts with empty chats
        self.root.get_screen('chat_screen').release()
        self.conversations.reset()
        self.root.get_screen('conversations_screen').populate(
            self.conversations, self.open_conversation
        )

    def switch_login_screen(self, session, is_logged_in):
        if is_logged_in:
            self.root.transition.direction = 'left'
            self.root.current = 'conversations_screen'
        else:
            self.root.transition.direction = 'right'
            self.root.current = 'welcome_screen'

    def open_conversation(self, chat_id):
        conversation = self.conversations.get(chat_id)
        self.root.get_screen('chat_screen').show(conversation)
        self.root.transition.direction = 'left'
        self.root.current = 'chat_screen'
        Logger.info(f"LlamaChat: opened {conversation.title}")

    def go_back_to_conversations(self):
        self.root.get_screen('chat_screen').ids.chat_input.focus = False
        self.root.transition.direction = 'right'
        self.root.current = 'conversations_screen'

    def send_message(self, chat_input_widget):
        conversation = self.root.get_screen('chat_screen').conversation
        if conversation.send(chat_input_widget.text) is None:
            self.show_toast_msg("Please type a message!", is_error=True)
            return
        chat_input_widget.text = "" # blank the input

    def copy_message(self, message):
        Clipboard.copy(message.content)
        self.show_toast_msg("Copied to clipboard")


def run():
    LlamaChatApp().run()


# Standard Python entry point: only run the app when this file is executed directly.
if __name__ == '__main__':
    run()
