"""CSS styles for the SPL Quick Wallet application."""

CSS = """
Screen {
    background: #1e1e2e;
}

Header {
    background: #181825;
    text-style: bold;
    padding: 0 1;
    height: 3;
}

#cluster-status {
    background: #181825;
    color: #a6adc8;
    padding: 0 2;
    height: 1;
    text-align: right;
    dock: top;
}

Footer {
    background: #181825;
    height: 2;
}

DataTable {
    background: #1e1e2e;
    border: solid #3b82f6;
}

Button {
    background: transparent;
    color: #3b82f6;
    border: none;
    height: 3;
    min-height: 3;
    min-width: 20;
    padding: 0 1;
    margin: 0;
    content-align: center middle;
}

Button:hover {
    background: #3b82f6;
    color: #ffffff;
    text-style: underline;
}

Button:focus {
    background: #3b82f6;
    color: #ffffff;
    text-style: bold underline reverse;
}

Button.primary {
    background: #22d3ee;
    color: #0f172a;
    border: solid #22d3ee;
    text-style: bold;
}

Horizontal {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

Horizontal > * {
    height: auto;
}

#connect-panel, #session-panel {
    padding: 1 2;
    height: auto;
}

#session-panel Label {
    margin-bottom: 0;
}

#account-address {
    color: #f8fafc;
    text-style: bold;
}

#sol-balance {
    color: #67e8f9;
    margin-bottom: 1;
}

#tokens-title, #mint-title, #transfer-title {
    color: #67e8f9;
    text-style: bold;
    margin-top: 1;
}

#tokens-table {
    width: 1fr;
    min-height: 6;
    margin-bottom: 1;
}

#disconnect-button {
    border: solid #f43f5e;
    color: #f43f5e;
}

#disconnect-button:hover {
    background: #f43f5e;
    color: #0f172a;
}

#operation-result {
    min-height: 2;
    margin-top: 1;
    color: #f8fafc;
}

#error-line {
    color: #f43f5e;
    padding: 0 2;
    min-height: 1;
}

.hidden {
    display: none;
}

ModalScreen {
    align: center middle;
}

#dialog {
    width: 72;
    height: auto;
    padding: 1 2;
    background: #181825;
    border: solid #3b82f6;
}

#result-title {
    color: #22c55e;
    text-style: bold;
}

#signature-display {
    color: #f8fafc;
    margin-bottom: 1;
}

#loading-message {
    color: #facc15;
    text-style: bold;
}
"""
