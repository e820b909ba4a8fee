# --- Purpose -------------------------------------------------------------------
# Small animation toolkit shared by the screens:
#   - AnimatedBehavior: mixin adding a vertical offset and a scale transform to
#     any widget, plus optional "press" feedback (shrink while held).
#   - reveal(): fade a widget in while sliding it up into place.
#   - pop_in(): reveal() plus a grow-from-0.9 effect, used for new chat bubbles.

from kivy.animation import Animation
from kivy.graphics import PopMatrix, PushMatrix, Scale, Translate
from kivy.metrics import dp
from kivy.properties import BooleanProperty, NumericProperty

# Kivy has no spring animations; "out_back" overshoots slightly like one.
SPRING_DURATION = 0.3
SPRING_TRANSITION = "out_back"
REVEAL_DURATION = 0.8
REVEAL_TRANSITION = "out_quad"
SLIDE_OFFSET = 20
SCALE_PRESSED = 0.97
SCALE_INSERTED = 0.9


class AnimatedBehavior(object):
    # offset_y > 0 draws the widget lower than its layout position
    offset_y = NumericProperty(0)
    scale = NumericProperty(1)
    press_feedback = BooleanProperty(False)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._pressed = False
        self._translate = Translate()
        self._scale = Scale(1)
        # ahead of anything the kv rules already drew in canvas.before
        self.canvas.before.insert(0, PushMatrix())
        self.canvas.before.insert(1, self._translate)
        self.canvas.before.insert(2, self._scale)
        self.canvas.after.add(PopMatrix())
        self.bind(
            offset_y=self._update_transform,
            scale=self._update_transform,
            center=self._update_transform,
        )

    def _update_transform(self, *args):
        self._translate.xy = (0, -self.offset_y)
        self._scale.origin = self.center
        self._scale.xyz = (self.scale, self.scale, 1)

    def on_touch_down(self, touch):
        if self.press_feedback and not self.disabled and self.collide_point(*touch.pos):
            self._pressed = True
            Animation.cancel_all(self, "scale")
            Animation(scale=SCALE_PRESSED, d=0.15, t="out_quad").start(self)
        return super().on_touch_down(touch)

    def on_touch_up(self, touch):
        if self._pressed:
            self._pressed = False
            Animation.cancel_all(self, "scale")
            Animation(scale=1, d=SPRING_DURATION, t=SPRING_TRANSITION).start(self)
        return super().on_touch_up(touch)


def reveal(widget, duration=REVEAL_DURATION, transition=REVEAL_TRANSITION, **targets):
    widget.opacity = 0
    widget.offset_y = dp(SLIDE_OFFSET)
    anim = Animation(opacity=1, offset_y=0, d=duration, t=transition, **targets)
    anim.start(widget)
    return anim


def pop_in(widget):
    widget.scale = SCALE_INSERTED
    return reveal(widget, SPRING_DURATION, SPRING_TRANSITION, scale=1)
