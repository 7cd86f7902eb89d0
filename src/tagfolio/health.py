"""
Health check functionality for tagfolio application.

This module checks the photo store, the authentication configuration and the
environment, and renders the results on a Streamlit page.
"""

import json
import platform
import time
from typing import Any

import streamlit as st

from tagfolio import __version__
from tagfolio.config import get_config, get_env, get_environment, get_photo_store_backend
from tagfolio.logging_config import get_logger
from tagfolio.services.auth import get_auth_service
from tagfolio.services.photo_store import get_photo_store

logger = get_logger(__name__)


def check_photo_store_health() -> dict[str, Any]:
    """Check that the configured photo store can be read."""
    try:
        result = get_photo_store().check_health()
    except Exception as e:
        logger.error("photo_store_health_check_failed", error=str(e))
        result = {"status": "unhealthy", "message": f"Photo store unavailable: {str(e)}"}
    result["timestamp"] = time.time()
    return result


def check_auth_health() -> dict[str, Any]:
    """Check that the authentication service is configured."""
    try:
        result = get_auth_service().check_configuration()
    except Exception as e:
        logger.error("auth_health_check_failed", error=str(e))
        result = {"status": "unhealthy", "message": f"Authentication not configured: {str(e)}"}
    result["timestamp"] = time.time()
    return result


def check_environment_health() -> dict[str, Any]:
    """Check environment configuration."""
    required_env_vars = ["ENVIRONMENT"]

    if not get_config().is_development():
        required_env_vars.append("FIREBASE_API_KEY")
        if get_photo_store_backend() == "firestore":
            required_env_vars.append("GOOGLE_CLOUD_PROJECT")

    missing_vars = [var for var in required_env_vars if not get_env(var)]

    if missing_vars:
        return {
            "status": "unhealthy",
            "message": f"Missing environment variables: {', '.join(missing_vars)}",
            "timestamp": time.time(),
            "missing_vars": missing_vars,
        }

    return {
        "status": "healthy",
        "message": "Environment configuration is valid",
        "timestamp": time.time(),
        "config": {"environment": get_environment(), "photo_store_backend": get_photo_store_backend()},
    }


def get_application_info() -> dict[str, Any]:
    """Get application information."""
    return {
        "name": "tagfolio",
        "version": __version__,
        "environment": get_environment(),
        "timestamp": time.time(),
        "uptime": time.time() - st.session_state.get("app_start_time", time.time()),
        "python_version": platform.python_version(),
        "platform": platform.system(),
    }


def perform_health_check() -> dict[str, Any]:
    """Perform comprehensive health check."""
    logger.info("health_check_started")

    start_time = time.time()

    if "app_start_time" not in st.session_state:
        st.session_state["app_start_time"] = time.time()

    checks = {
        "photo_store": check_photo_store_health(),
        "auth": check_auth_health(),
        "environment": check_environment_health(),
    }

    unhealthy_services = [service for service, result in checks.items() if result["status"] != "healthy"]
    overall_status = "unhealthy" if unhealthy_services else "healthy"

    health_response = {
        "status": overall_status,
        "timestamp": time.time(),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
        "application": get_application_info(),
        "checks": checks,
    }

    if unhealthy_services:
        health_response["unhealthy_services"] = unhealthy_services

    logger.info(
        "health_check_completed",
        status=overall_status,
        duration_ms=health_response["duration_ms"],
        unhealthy_services=unhealthy_services,
    )

    return health_response


def health_check_json() -> str:
    """Return health check as JSON string."""
    return json.dumps(perform_health_check(), indent=2, default=str)


def render_health_page() -> None:
    """Render health check page for Streamlit."""
    st.set_page_config(page_title="Health Check - tagfolio", page_icon="🏥", layout="wide")

    st.title("🏥 Health Check")
    st.markdown("---")

    with st.spinner("Performing health check..."):
        health_data = perform_health_check()

    if health_data["status"] == "healthy":
        st.success(f"✅ Application is healthy (checked in {health_data['duration_ms']}ms)")
    else:
        st.error(f"❌ Application is unhealthy (checked in {health_data['duration_ms']}ms)")
        st.warning(f"Unhealthy services: {', '.join(health_data['unhealthy_services'])}")

    st.subheader("📱 Application Information")
    app_info = health_data["application"]

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Version", app_info["version"])
    with col2:
        st.metric("Environment", app_info["environment"])
    with col3:
        st.metric("Uptime", f"{app_info['uptime']:.1f}s")

    st.subheader("🔍 Service Health Checks")

    for service, check_result in health_data["checks"].items():
        with st.expander(service.replace("_", " ").title(), expanded=check_result["status"] != "healthy"):
            if check_result["status"] == "healthy":
                st.success(f"✅ {check_result['message']}")
            else:
                st.error(f"❌ {check_result['message']}")
            st.json(check_result)

    if st.query_params.get("format") == "json":
        st.code(json.dumps(health_data, indent=2, default=str), language="json")


if __name__ == "__main__":
    render_health_page()
