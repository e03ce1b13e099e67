"""
On-screen control bar for the living Mandelbrot app.

Provides the command surface: a Reset button plus Flow and Rays toggle
buttons that light up while their effect is enabled.
"""

import pygame


COMMAND_RESET = 'reset'
COMMAND_FLOW = 'flow'
COMMAND_RAYS = 'rays'


class Button:
    """A clickable button, optionally showing an on/off state."""

    def __init__(self, x, y, width, label, command, height=24, toggle=False):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.label = label
        self.command = command
        self.toggle = toggle
        self.active = False
        self.hovered = False

    def get_rect(self):
        return pygame.Rect(self.x, self.y, self.width, self.height)

    def handle_event(self, event):
        """Returns (handled, clicked)."""
        if event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 3):
            if self.get_rect().collidepoint(event.pos):
                # Right clicks on a button are swallowed so they don't zoom
                return True, event.button == 1
        elif event.type == pygame.MOUSEMOTION:
            self.hovered = self.get_rect().collidepoint(event.pos)
        return False, False

    def draw(self, screen, font):
        rect = self.get_rect()

        if self.toggle and self.active:
            bg_color = (70, 100, 70)
            border_color = (100, 150, 100)
            text_color = (220, 255, 220)
        else:
            bg_color = (65, 65, 65) if self.hovered else (55, 55, 55)
            border_color = (100, 100, 100)
            text_color = (200, 200, 200)

        pygame.draw.rect(screen, bg_color, rect)
        pygame.draw.rect(screen, border_color, rect, 1)

        label = self.label
        if self.toggle:
            label = f"{self.label}: {'on' if self.active else 'off'}"
        text = font.render(label, True, text_color)
        text_x = rect.x + (rect.width - text.get_width()) // 2
        text_y = rect.y + (rect.height - text.get_height()) // 2
        screen.blit(text, (text_x, text_y))


class ControlBar:
    """
    Row of command buttons in the top-left corner.

    Usage:
        bar = ControlBar(10, 10)
        handled, command = bar.handle_event(event)
        if command == COMMAND_FLOW:
            controller.toggle_flow()
    """

    BUTTON_WIDTH = 90
    SPACING = 6

    def __init__(self, x, y):
        self.x = x
        self.y = y
        self.font = None

        layout = [
            ('Reset', COMMAND_RESET, False),
            ('Flow', COMMAND_FLOW, True),
            ('Rays', COMMAND_RAYS, True),
        ]
        self.buttons = []
        for i, (label, command, toggle) in enumerate(layout):
            bx = x + i * (self.BUTTON_WIDTH + self.SPACING)
            self.buttons.append(Button(bx, y, self.BUTTON_WIDTH, label, command, toggle=toggle))

    def init_fonts(self):
        pygame.font.init()
        self.font = pygame.font.SysFont('Arial', 14)

    def sync(self, toggles):
        """Reflect the current EffectToggles in the toggle buttons."""
        for button in self.buttons:
            if button.command == COMMAND_FLOW:
                button.active = toggles.flow_enabled
            elif button.command == COMMAND_RAYS:
                button.active = toggles.rays_enabled

    def handle_event(self, event):
        """
        Handle a pygame event.

        Returns (handled, command), where command is one of the COMMAND_*
        constants when a button was clicked and None otherwise.
        """
        handled_any = False
        for button in self.buttons:
            handled, clicked = button.handle_event(event)
            if clicked:
                return True, button.command
            handled_any = handled_any or handled
        return handled_any, None

    def get_rect(self):
        """Get the bounding rectangle of the whole bar."""
        width = len(self.buttons) * self.BUTTON_WIDTH + (len(self.buttons) - 1) * self.SPACING
        return pygame.Rect(self.x, self.y, width, self.buttons[0].height)

    def point_in_bar(self, pos):
        return self.get_rect().collidepoint(pos)

    def draw(self, screen):
        if self.font is None:
            self.init_fonts()
        for button in self.buttons:
            button.draw(screen, self.font)
