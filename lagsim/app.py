"""Interactive window showing the server and two client views side by side."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Iterator, Sequence

import pygame

from lagsim.client import Client
from lagsim.server import Server

SCREEN_SIZE = (800, 600)

BLUE = pygame.Color(0, 121, 241)
RED = pygame.Color(230, 41, 55)
DARKGRAY = pygame.Color(80, 80, 80)
LIGHTGRAY = pygame.Color(200, 200, 200)
PANEL_BACKGROUND = pygame.Color(235, 235, 235)
PANEL_TITLE = pygame.Color(120, 120, 120)
BUTTON_BACKGROUND = pygame.Color(210, 210, 210)

FONT_SIZE = 20
ENTITY_SIZE = 20
TITLE_HEIGHT = 20
ROW_HEIGHT = 22
ROW_INNER_HEIGHT = 18
LATENCY_MIN = 5.0
LATENCY_MAX = 5000.0


def _format_number(value: float) -> str:
    """Render a number the way the overlay shows it: whole values without a fraction."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _colour_for(entity_id: int) -> pygame.Color:
    return BLUE if entity_id == 1 else RED


def _draw_text(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    x: float,
    baseline: float,
    colour: pygame.Color,
) -> None:
    rendered = font.render(text, True, colour)
    surface.blit(rendered, (x, baseline - font.get_ascent()))


@dataclass
class _Row:
    """One line of the settings panel."""

    kind: str
    rect: pygame.Rect
    client: Client
    text: str
    attribute: str | None = None


class SettingsPanel:
    """A panel of labels, toggle buttons and latency sliders for each client."""

    def __init__(
        self,
        clients: Sequence[tuple[str, Client]],
        position: tuple[int, int] = (500, 20),
        size: tuple[int, int] = (200, 500),
    ) -> None:
        self.clients = list(clients)
        self.rect = pygame.Rect(position, size)

    def _rows(self) -> Iterator[_Row]:
        x = self.rect.x + 5
        width = self.rect.width - 10
        y = self.rect.y + TITLE_HEIGHT + 4

        def place() -> pygame.Rect:
            nonlocal y
            rect = pygame.Rect(x, y, width, ROW_INNER_HEIGHT)
            y += ROW_HEIGHT
            return rect

        for label, client in self.clients:
            yield _Row("label", place(), client, f"{label} Entity ID: {client.entity_id}")
            yield _Row(
                "label",
                place(),
                client,
                f"Prediction?: {str(client.client_side_prediction).lower()}",
            )
            yield _Row(
                "label",
                place(),
                client,
                f"Reconciliation?: {str(client.server_reconciliation).lower()}",
            )
            yield _Row(
                "label",
                place(),
                client,
                f"Interpolation: {str(client.entity_interpolation).lower()}",
            )
            yield _Row("button", place(), client, "Toggle Prediction", "client_side_prediction")
            yield _Row(
                "button", place(), client, "Toggle Reconciliation", "server_reconciliation"
            )
            yield _Row(
                "button", place(), client, "Toggle Interpolation", "entity_interpolation"
            )
            yield _Row(
                "label", place(), client, f"Lag: {_format_number(client.latency_to_server)}"
            )
            yield _Row("slider", place(), client, "[5 .. 500]", "latency_to_server")

    @staticmethod
    def _slider_value(rect: pygame.Rect, x: float) -> float:
        fraction = (x - rect.x) / max(1, rect.width - 1)
        fraction = min(1.0, max(0.0, fraction))
        return LATENCY_MIN + fraction * (LATENCY_MAX - LATENCY_MIN)

    def draw(self, surface: pygame.Surface, font: pygame.font.Font) -> None:
        """Draw the panel and its controls onto ``surface``."""
        pygame.draw.rect(surface, PANEL_BACKGROUND, self.rect)
        title = pygame.Rect(self.rect.x, self.rect.y, self.rect.width, TITLE_HEIGHT)
        pygame.draw.rect(surface, PANEL_TITLE, title)
        surface.blit(font.render("Settings", True, LIGHTGRAY), (title.x + 5, title.y + 2))
        pygame.draw.rect(surface, DARKGRAY, self.rect, 1)

        for row in self._rows():
            if row.kind == "button":
                pygame.draw.rect(surface, BUTTON_BACKGROUND, row.rect)
                pygame.draw.rect(surface, DARKGRAY, row.rect, 1)
                surface.blit(font.render(row.text, True, DARKGRAY), (row.rect.x + 3, row.rect.y + 2))
            elif row.kind == "slider":
                value = getattr(row.client, row.attribute)
                fraction = (value - LATENCY_MIN) / (LATENCY_MAX - LATENCY_MIN)
                fraction = min(1.0, max(0.0, fraction))
                track_y = row.rect.centery
                pygame.draw.line(
                    surface, DARKGRAY, (row.rect.x, track_y), (row.rect.right - 1, track_y), 2
                )
                handle_x = row.rect.x + int(fraction * (row.rect.width - 1))
                handle = pygame.Rect(0, 0, 6, row.rect.height)
                handle.center = (handle_x, track_y)
                pygame.draw.rect(surface, PANEL_TITLE, handle)
                surface.blit(
                    font.render(row.text, True, DARKGRAY), (row.rect.x + 3, row.rect.y + 2)
                )
            else:
                surface.blit(font.render(row.text, True, DARKGRAY), (row.rect.x, row.rect.y + 2))

    def handle_click(self, position: tuple[int, int]) -> bool:
        """Press the button or slider under ``position``; report whether one was hit."""
        for row in self._rows():
            if not row.rect.collidepoint(position):
                continue
            if row.kind == "button":
                setattr(row.client, row.attribute, not getattr(row.client, row.attribute))
                return True
            if row.kind == "slider":
                setattr(row.client, row.attribute, self._slider_value(row.rect, position[0]))
                return True
        return False

    def handle_drag(self, position: tuple[int, int]) -> bool:
        """Move the slider under ``position``; report whether one was hit."""
        for row in self._rows():
            if row.kind == "slider" and row.rect.collidepoint(position):
                setattr(row.client, row.attribute, self._slider_value(row.rect, position[0]))
                return True
        return False


def draw_client_entities(
    surface: pygame.Surface, font: pygame.font.Font, client: Client, y_offset: float
) -> None:
    """Draw one client's view of the world in a band around ``y_offset``."""
    player_colour = _colour_for(client.entity_id)
    width = surface.get_width()
    pygame.draw.rect(
        surface,
        player_colour,
        pygame.Rect(10, int(y_offset - 65), width - 20, 120),
        2,
    )

    if client.entity_id == 2:
        move_message = "move with A and D keys"
    else:
        move_message = "move with LEFT and RIGHT arrow keys"

    _draw_text(
        surface,
        font,
        f"Player {client.entity_id} view - {move_message}",
        20,
        y_offset - 40,
        DARKGRAY,
    )
    _draw_text(
        surface,
        font,
        f"Non-acknowledged messages: {len(client.pending_inputs)}",
        20,
        y_offset - 20,
        DARKGRAY,
    )

    for entity in client.entities.values():
        pygame.draw.rect(
            surface,
            _colour_for(entity.entity_id),
            pygame.Rect(int(entity.x), int(y_offset + 20), ENTITY_SIZE, ENTITY_SIZE),
        )


def draw_server_perspective(
    surface: pygame.Surface, font: pygame.font.Font, server: Server
) -> None:
    """Draw the server's authoritative view of the world."""
    width = surface.get_width()
    pygame.draw.rect(surface, DARKGRAY, pygame.Rect(10, 220, width - 20, 120), 2)

    for entity in server.entities.values():
        pygame.draw.rect(
            surface,
            _colour_for(entity.entity_id),
            pygame.Rect(int(entity.x), 260, ENTITY_SIZE, ENTITY_SIZE),
        )

    first = _format_number(server.last_processed_inputs.get(1, 0.0))
    second = _format_number(server.last_processed_inputs.get(2, 0.0))
    _draw_text(
        surface,
        font,
        f"Last Acknowledged: Player 0 - {first} Player 1 - {second}",
        20,
        240,
        DARKGRAY,
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="lagsim",
        description="Show client prediction, reconciliation and interpolation under lag.",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="stop after this many frames (0 runs until the window is closed)",
    )
    args = parser.parse_args(argv)
    if args.frames < 0:
        parser.error("--frames must not be negative")
    return args


def main(argv: Sequence[str] | None = None) -> int:
    """Open the window and run the simulation until it is closed."""
    args = _parse_args(argv)

    server = Server()
    client1 = server.add_client()
    client2 = server.add_client()
    server.list_clients()

    pygame.init()
    try:
        screen = pygame.display.set_mode(SCREEN_SIZE)
        pygame.display.set_caption("Netcode Example")
        font = pygame.font.Font(None, FONT_SIZE)
        panel = SettingsPanel([("Client 1", client1), ("Client 2", client2)])
        frame_clock = pygame.time.Clock()

        frames = 0
        running = True
        while running:
            delta_time = frame_clock.tick(60) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    panel.handle_click(event.pos)
                elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
                    panel.handle_drag(event.pos)

            keys = pygame.key.get_pressed()
            client1.key_left = bool(keys[pygame.K_LEFT])
            client1.key_right = bool(keys[pygame.K_RIGHT])
            client2.key_left = bool(keys[pygame.K_a])
            client2.key_right = bool(keys[pygame.K_d])

            screen.fill(LIGHTGRAY)
            draw_server_perspective(screen, font, server)
            draw_client_entities(screen, font, client1, 120.0)
            draw_client_entities(screen, font, client2, 450.0)
            panel.draw(screen, font)

            server.update(delta_time)
            pygame.display.flip()

            frames += 1
            if args.frames and frames >= args.frames:
                running = False
    finally:
        pygame.quit()
    return 0