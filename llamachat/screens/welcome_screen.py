# --- Purpose -------------------------------------------------------------------
# The first page a logged-out user sees: app title, a username field and the
# "Continue" button. The layout lives in kv_files/welcome_screen.kv; this module
# holds the animated widget types used there and the fade-in on enter.

# screens/welcome_screen.py
from kivy.graphics.texture import Texture
from kivy.properties import ObjectProperty
from kivymd.uix.button import MDFillRoundFlatButton
from kivymd.uix.label import MDLabel
from kivymd.uix.screen import MDScreen
from kivymd.uix.textfield import MDTextField

from llamachat.animations import AnimatedBehavior, reveal


class AnimatedLabel(AnimatedBehavior, MDLabel):
    pass


class AnimatedTextField(AnimatedBehavior, MDTextField):
    pass


GRADIENT_LEFT = (128, 0, 128)
GRADIENT_RIGHT = (0, 122, 255)


def horizontal_gradient(left, right):
    """Two-texel RGB texture that linear filtering stretches into a gradient."""
    texture = Texture.create(size=(2, 1), colorfmt="rgb")
    texture.blit_buffer(bytes(left + right), colorfmt="rgb", bufferfmt="ubyte")
    texture.mag_filter = "linear"
    texture.wrap = "clamp_to_edge"
    return texture


class AnimatedButton(AnimatedBehavior, MDFillRoundFlatButton):
    pass


class GradientButton(AnimatedButton):
    """Capsule button painted with a purple-to-blue gradient (see kv rule)."""

    gradient = ObjectProperty(None)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.gradient = horizontal_gradient(GRADIENT_LEFT, GRADIENT_RIGHT)


class WelcomeScreen(MDScreen):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # The ScreenManager navigates with `root.current = 'welcome_screen'`.
        self.name = 'welcome_screen'

    def on_pre_enter(self, *args):
        for widget_id in ("title_label", "username_input", "continue_button"):
            self.ids[widget_id].opacity = 0

    def on_enter(self, *args):
        # title, field and button all ease in together
        for widget_id in ("title_label", "username_input", "continue_button"):
            reveal(self.ids[widget_id])
