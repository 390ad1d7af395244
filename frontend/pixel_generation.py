"""Streamlit page for provisioning a pixel for a new client."""

from __future__ import annotations

import streamlit as st

from pixel_admin.config import get_backend_settings
from pixel_admin.connectors.pixel_backend import PixelBackendClient
from pixel_admin.errors import ProvisioningError
from pixel_admin.logging_utils import configure_logging
from pixel_admin.services.provisioning import PixelProvisioner

st.set_page_config(page_title="Pixel Generator", layout="centered")


@st.cache_resource(show_spinner=False)
def _provisioner() -> PixelProvisioner:
    configure_logging()
    return PixelProvisioner(backend=PixelBackendClient(settings=get_backend_settings()))


st.title("Pixel & Webhook Generator")
st.caption("Automatically create pixels, databases, and webhooks for your clients")

client_name = st.text_input("Client Name", placeholder="Enter client slug (e.g. strategy_simple)")
st.caption("Only letters, numbers, and underscores allowed")
website = st.text_input("Website URL", placeholder="example.com")

if st.button("Generate Pixel", type="primary"):
    with st.spinner("Generating pixel..."):
        try:
            pixel = _provisioner().generate(client_name, website)
        except ProvisioningError as exc:
            st.error(str(exc))
        else:
            st.success(f"Pixel created for {pixel.client_name} ({pixel.website})")
            st.code(pixel.pixel_snippet, language="html")
            if pixel.sheet_url:
                st.link_button("Open Google Sheet", pixel.sheet_url)
