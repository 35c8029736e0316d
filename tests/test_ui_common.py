import pygame

from pixelbox.ui.common import Button, is_pointer_motion, is_primary_pointer_event, pointer_event_pos


def test_primary_pointer_event_accepts_left_mouse_button():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
    assert is_primary_pointer_event(event, is_down=True)


def test_primary_pointer_event_accepts_touch_emulated_mouse_button_zero():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=0, pos=(10, 10), touch=True)
    assert is_primary_pointer_event(event, is_down=True)


def test_primary_pointer_event_rejects_right_mouse_button():
    event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(10, 10))
    assert not is_primary_pointer_event(event, is_down=True)


def test_pointer_motion_and_position():
    event = pygame.event.Event(pygame.MOUSEMOTION, pos=(7, 8), rel=(1, 1), buttons=(1, 0, 0))
    assert is_pointer_motion(event)
    assert pointer_event_pos(event, pygame.Rect(0, 0, 100, 100)) == (7, 8)


def test_button_hit():
    button = Button(rect=pygame.Rect(10, 10, 20, 20), label="Undo")
    assert button.hit((15, 15))
    assert not button.hit((35, 15))
