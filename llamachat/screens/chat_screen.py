# --- Purpose -------------------------------------------------------------------
# This module defines the per-conversation *Chat* screen:
#   • MessageBubble: the rounded, colored text label of one message.
#   • BubbleRow: a full-width row that aligns a bubble right (user) or left
#     (assistant, with a copy button) and animates in when added.
#   • ChatScreen: history + input bar. It follows one `Conversation` at a time
#     and adds a BubbleRow for every message the conversation announces.
# The visual structure (top bar, scroll view, input bar) is in
# kv_files/chat_screen.kv and reached here via `ids`.

# screens/chat_screen.py
from kivy.clock import Clock
from kivy.metrics import dp
from kivy.properties import ColorProperty, NumericProperty, ObjectProperty
from kivy.uix.label import Label
from kivy.uix.widget import Widget
from kivymd.uix.boxlayout import MDBoxLayout
from kivymd.uix.button import MDIconButton
from kivymd.uix.screen import MDScreen

from llamachat.animations import AnimatedBehavior, pop_in

USER_BUBBLE_COLOR = (0.5, 0.0, 0.5, 0.8)
ASSISTANT_BUBBLE_COLOR = (0.5, 0.5, 0.5, 0.2)
BUBBLE_WIDTH_RATIO = 0.75


class AnimatedIconButton(AnimatedBehavior, MDIconButton):
    pass


class MessageBubble(Label):
    bubble_color = ColorProperty(ASSISTANT_BUBBLE_COLOR)
    max_width = NumericProperty(dp(280))

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.bind(text=self._fit, max_width=self._fit)
        self._fit()

    def _fit(self, *args):
        # Shrink-wrap short messages, wrap long ones at max_width.
        self.text_size = (None, None)
        self.texture_update()
        if self.texture_size[0] > self.max_width:
            self.text_size = (self.max_width, None)
            self.texture_update()
        self.size = self.texture_size


class BubbleRow(AnimatedBehavior, MDBoxLayout):
    message = ObjectProperty(None)

    def __init__(self, message, on_copy=None, **kwargs):
        super().__init__(
            orientation="horizontal",
            size_hint_y=None,
            spacing=dp(4),
            **kwargs
        )
        self.message = message
        self.bubble = MessageBubble(
            text=message.content,
            size_hint=(None, None),
            padding=[dp(12), dp(12)],
            color=(1, 1, 1, 1) if message.is_user else self.theme_cls.text_color,
            bubble_color=USER_BUBBLE_COLOR if message.is_user else ASSISTANT_BUBBLE_COLOR,
        )
        if message.is_user:
            self.add_widget(Widget())
            self.add_widget(self.bubble)
        else:
            self.add_widget(self.bubble)
            if on_copy is not None:
                copy_btn = MDIconButton(
                    icon="content-copy",
                    pos_hint={"center_y": 0.5},
                    on_release=lambda x: on_copy(self.message),
                )
                self.add_widget(copy_btn)
            self.add_widget(Widget())
        self.bind(width=self._update_bubble_width)
        self.bubble.bind(height=self.setter('height'))
        self.height = self.bubble.height

    def _update_bubble_width(self, instance, width):
        self.bubble.max_width = width * BUBBLE_WIDTH_RATIO


class ChatScreen(MDScreen):
    conversation = ObjectProperty(None, allownone=True)
    # copy_callback(message) for the assistant bubbles' copy button
    copy_callback = ObjectProperty(None, allownone=True)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.name = 'chat_screen'

    def show(self, conversation):
        """Switch the screen to `conversation` and render its history."""
        self.release()
        self.conversation = conversation
        self.ids.top_bar.title = conversation.title
        self.ids.chat_input.text = ""
        history = self.ids.chat_history_id
        history.clear_widgets()
        for message in conversation.messages:
            self.add_bubble(message, animate=False)
        conversation.bind(on_message=self._on_message)
        self._scroll_to_bottom()

    def release(self):
        """Stop following the current conversation."""
        if self.conversation is not None:
            self.conversation.unbind(on_message=self._on_message)
            self.conversation = None

    def _on_message(self, conversation, message):
        self.add_bubble(message)

    def add_bubble(self, message, animate=True):
        row = BubbleRow(message, on_copy=self.copy_callback)
        self.ids.chat_history_id.add_widget(row)
        if animate:
            pop_in(row)
            self._scroll_to_bottom()

    def _scroll_to_bottom(self):
        # wait one frame so the history has its new height
        Clock.schedule_once(lambda dt: setattr(self.ids.scroll_view, 'scroll_y', 0))

    def on_touch_down(self, touch):
        # tapping outside the input bar dismisses the soft keyboard
        chat_input = self.ids.chat_input
        if chat_input.focus and not self.ids.input_bar.collide_point(*self.to_local(*touch.pos)):
            chat_input.focus = False
        return super().on_touch_down(touch)
