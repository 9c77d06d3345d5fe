from nicegui import ui

BRAND_BG = '#0b0f14'
PANEL_BG = '#111826'
ACCENT = '#22c55e'
NEGATIVE = '#ef4444'


def change_colors():
    ui.colors(primary=ACCENT, positive=ACCENT, negative=NEGATIVE)


def add_style():
    change_colors()
    ui.add_head_html("""
        <link href="https://fonts.googleapis.com/css?family=Montserrat:700,400&display=swap" rel="stylesheet">
        <style>
        html, body {
        width: 100%;
        min-height: 100vh;
        overflow-x: hidden;
        box-sizing: border-box;
        font-family: 'Montserrat', Arial, sans-serif;
        background: #0b0f14;
        color: #e6edf3;
        margin: 0;
        }
        body {
        display: flex;
        flex-direction: column;
        min-height: 100vh;
        }
        *, *::before, *::after {
            box-sizing: inherit;
        }
        .navbar {
        width: 100%;
        background: #111826;
        color: #fff;
        display: flex;
        justify-content: space-between;
        align-items: center;
        padding: 18px 40px;
        border-bottom: 1px solid #223045;
        }
        .nav-left, .nav-right {
        display: flex; align-items: center; gap: 12px;
        }
        .navbar a {
        color: #fff;
        text-decoration: none;
        font-weight: 500;
        font-size: 1.1em;
        transition: color .2s;
        }
        .navbar a:hover {
        color: #22c55e;
        }
        .brand {
        font-weight: 700;
        letter-spacing: .04em;
        }
        .page-body {
        width: min(1100px, 96vw);
        margin: 24px auto;
        }
        .price-chart-card {
        background: #000 !important;
        color: #e6edf3;
        border-radius: 10px;
        }
        .price-chart-ticker {
        font-size: 1.6em;
        font-weight: 700;
        }
        .price-chart-price {
        font-size: 1.4em;
        font-weight: 600;
        }
        .price-chart-delta {
        font-size: 1em;
        font-weight: 600;
        }
        .price-chart-bar {
        border-top: 1px solid #1f2937;
        padding-top: 10px;
        margin-top: 6px;
        }
        .search-card {
        background: #111826 !important;
        color: #e6edf3;
        border-radius: 12px;
        padding: 40px 48px;
        }
        .footer {
        width: 100%;
        flex-shrink: 0;
        margin-top: auto;
        background: #111826;
        color: #9aa4b2;
        padding: 20px 40px;
        display: flex;
        justify-content: space-between;
        align-items: center;
        font-size: 0.95em;
        border-top: 1px solid #223045;
        }
        .footer a {
        color: #22c55e;
        text-decoration: none;
        margin-left: 18px;
        }
        @media (max-width: 600px) {
        .footer { flex-direction: column; gap: 8px;}
        .search-card { padding: 18px 7vw;}
        }
        </style>
        """)
