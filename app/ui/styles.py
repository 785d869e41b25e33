# -----------------------------------------------------------------------------
# (c) 2026 Andreas Wagner. All Rights Reserved.
#
# This code is part of the Succession Simulator project.
# Unauthorized usage or distribution is not permitted.
# -----------------------------------------------------------------------------

"""
Application Styles and Design Tokens
"""

APP_STYLE = """
<style>
    :root {
        /* Color System - Slate & Turquoise */
        --bg-from: #0f172a;
        --bg-to: #334155;
        --panel-bg: rgba(51, 65, 85, 0.5);
        --panel-border: rgba(255, 255, 255, 0.1);
        --text-primary: #f3f4f6;
        --text-secondary: #cbd5e1;
        --text-muted: #94a3b8;
        --accent-primary: #00FFD2;
        --danger: #f87171;
        --danger-bg: rgba(254, 202, 202, 0.2);

        --radius: 10px;
    }

    .stApp {
        background: linear-gradient(135deg, var(--bg-from) 0%, var(--bg-to) 100%);
        color: var(--text-primary);
    }

    .sim-header {
        text-align: center;
        margin-bottom: 2rem;
    }
    .sim-header h1 {
        color: var(--text-primary);
        font-weight: 700;
    }
    .sim-header p {
        color: var(--text-secondary);
    }

    .section-title {
        color: var(--accent-primary);
        font-size: 1.4rem;
        font-weight: 600;
        margin-bottom: 1rem;
    }

    /* Result cards */
    .result-grid {
        display: grid;
        grid-template-columns: 1fr;
        gap: 0.75rem;
    }
    .result-card {
        background: rgba(30, 41, 59, 0.7);
        border-radius: var(--radius);
        padding: 0.9rem 1rem;
    }
    .result-card.danger {
        background: var(--danger-bg);
    }
    .result-label {
        font-size: 0.85rem;
        color: var(--text-muted);
    }
    .result-card.danger .result-label {
        color: #fca5a5;
    }
    .result-value {
        font-size: 1.25rem;
        font-weight: 700;
        color: var(--accent-primary);
    }
    .result-card.danger .result-value {
        font-size: 1.5rem;
        font-weight: 800;
        color: var(--danger);
    }
    .result-meta {
        font-size: 0.8rem;
        color: var(--text-muted);
        margin-top: 0.5rem;
    }

    /* Exemption notice */
    .exemption-box {
        background: #dcfce7;
        color: #14532d;
        padding: 1.5rem;
        border-radius: var(--radius);
        text-align: center;
    }
    .exemption-box .title {
        font-size: 1.25rem;
        font-weight: 700;
    }

    .disclaimer {
        font-size: 0.75rem;
        color: var(--text-muted);
        background: rgba(15, 23, 42, 0.5);
        padding: 1rem;
        border-radius: var(--radius);
        max-width: 48rem;
        margin: 2.5rem auto 0 auto;
        text-align: center;
    }
    .disclaimer h3 {
        font-size: 0.85rem;
        color: var(--text-secondary);
        margin-bottom: 0.5rem;
    }
</style>
"""
