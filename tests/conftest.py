"""Shared test fixtures."""

from __future__ import annotations

import pytest

from vecscene.render.sink import RecordingSink


# Depth-first pre-order: a, b, c, d, e, f
NESTED_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <path id="a" d="M0 0 L1 0 L1 1 Z" fill="#ff0000"/>
  <g id="g1">
    <path id="b" d="M0 0 L2 0 L2 2 Z" fill="#00ff00"/>
    <g id="g2">
      <path id="c" d="M0 0 L3 0 L3 3 Z" fill="#0000ff"/>
      <g id="g3">
        <path id="d" d="M0 0 L4 0 L4 4 Z" fill="#ffff00"/>
      </g>
      <path id="e" d="M0 0 L5 0 L5 5 Z" fill="#00ffff"/>
    </g>
  </g>
  <path id="f" d="M0 0 L6 0 L6 6 Z" fill="#ff00ff"/>
</svg>'''

NESTED_ORDER_COLORS = [
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (0, 255, 255),
    (255, 0, 255),
]

TRANSLATED_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="50" height="50">
  <g transform="translate(10, 0)">
    <g transform="translate(0, 10)">
      <path d="M0 0 L5 0 L5 5 Z" fill="red"/>
    </g>
  </g>
</svg>'''

STROKED_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="40" height="40">
  <path d="M5 5 L35 5 L35 35 L5 35 Z" fill="red"/>
  <path d="M5 20 L35 20" fill="none" stroke="blue" stroke-width="3"/>
  <path d="M10 10 L30 10 L30 30 Z" fill="#00ff00" stroke="#000000"/>
</svg>'''

GRADIENT_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <defs>
    <linearGradient id="sky">
      <stop offset="0" stop-color="#fff"/>
      <stop offset="1" stop-color="#00f"/>
    </linearGradient>
  </defs>
  <path d="M0 0 L10 0 L10 10 Z" fill="red"/>
  <path d="M0 0 L20 0 L20 20 Z" fill="green"/>
  <path d="M0 0 L30 0 L30 30 Z" fill="blue"/>
  <g>
    <path d="M0 0 L40 0 L40 40 Z" fill="url(#sky)"/>
  </g>
  <path d="M0 0 L50 0 L50 50 Z" fill="black"/>
</svg>'''

TEXT_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <path d="M0 0 L10 0 L10 10 Z" fill="red"/>
  <text x="10" y="20">hello</text>
</svg>'''

IMAGE_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" width="100" height="100">
  <g><image xlink:href="bunny.png" width="26" height="37"/></g>
  <path d="M0 0 L10 0 L10 10 Z" fill="red"/>
</svg>'''

SHAPES_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">
  <rect x="10" y="10" width="20" height="10" fill="red"/>
  <rect x="40" y="10" width="20" height="10" rx="2" fill="red"/>
  <circle cx="50" cy="50" r="10" fill="blue"/>
  <ellipse cx="20" cy="80" rx="10" ry="5" fill="blue"/>
  <line x1="0" y1="0" x2="100" y2="100" stroke="black"/>
  <polyline points="0,0 10,10 20,0" fill="none" stroke="black"/>
  <polygon points="60,60 80,60 70,80" fill="green"/>
</svg>'''

REOPEN_SVG = b'''<svg xmlns="http://www.w3.org/2000/svg" width="30" height="30">
  <path d="M0 0 L10 0 Z L20 0" fill="none" stroke="black"/>
</svg>'''


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def nested_svg() -> bytes:
    return NESTED_SVG


@pytest.fixture
def stroked_svg() -> bytes:
    return STROKED_SVG
