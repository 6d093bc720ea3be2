"""eNotas gateway client for issuing service invoices (NFS-e)."""

import logging
from typing import Any
from urllib.parse import quote

import requests

from service_billing.config import ENotasConfig
from service_billing.exceptions import ConfigurationError, RemoteServiceError, ValidationError
from service_billing.models.fiscal import Company, MunicipalService, ServiceInvoice
from service_billing.validation import validate_company

logger = logging.getLogger(__name__)

# Keys under which some gateway responses wrap the service list
LIST_KEYS = ("items", "servicos", "data", "results")


class ENotasClient:
    """Thin wrapper over the eNotas REST API.

    Parameters
    ----------
    config : ENotasConfig
        Gateway settings; ``api_key`` is required.
    session : requests.Session | None
        HTTP session, mostly for tests.
    """

    def __init__(self, config: ENotasConfig, session: requests.Session | None = None) -> None:
        if not config.api_key:
            raise ConfigurationError("eNotas API key not configured (set ENOTAS_API_KEY)")
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Basic {config.api_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.config.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else ""
            logger.error("eNotas %s %s failed (%s): %s", method, path, status, body)
            raise RemoteServiceError(f"eNotas request failed: {e}", status_code=status) from e
        except requests.exceptions.RequestException as e:
            logger.error("eNotas %s %s connection error: %s", method, path, e)
            raise RemoteServiceError(f"Connection error: {e}") from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError("Invalid response format from eNotas") from e

    # Companies
    def register_company(self, company: Company) -> dict[str, Any]:
        """Register an issuing company; returns the gateway's response."""
        validate_company(company)
        result = self._request("POST", "/v2/empresas", json=company.to_payload())
        logger.info("Registered company %s at eNotas", company.cnpj)
        return result

    def update_company(self, company_id: str, company: Company) -> dict[str, Any]:
        validate_company(company)
        return self._request("PUT", f"/v2/empresas/{company_id}", json=company.to_payload())

    def get_company(self, company_id: str) -> dict[str, Any]:
        return self._request("GET", f"/v2/empresas/{company_id}")

    def list_companies(self) -> list[dict[str, Any]]:
        return _as_list(self._request("GET", "/v2/empresas"))

    def delete_company(self, company_id: str) -> None:
        self._request("DELETE", f"/v2/empresas/{company_id}")
        logger.info("Deleted company %s at eNotas", company_id)

    def attach_certificate(self, company_id: str, certificate: bytes, password: str) -> None:
        """Upload the company's A1 digital certificate (.pfx)."""
        self._request(
            "POST",
            f"/v1/empresas/{company_id}/certificadoDigital",
            files={"arquivo": ("certificado.pfx", certificate, "application/x-pkcs12")},
            data={"senha": password},
            headers={"Content-Type": None},
        )

    # Invoices
    def issue_invoice(self, company_id: str, invoice: ServiceInvoice) -> dict[str, Any]:
        """Issue an NFS-e in the configured environment.

        Returns
        -------
        dict[str, Any]
            Gateway document, including the invoice id used by
            ``get_invoice`` and ``cancel_invoice``.
        """
        payload = invoice.to_payload()
        payload["tipo"] = "NFS-e"
        payload["ambiente"] = self.config.environment
        result = self._request("POST", f"/v1/empresas/{company_id}/nfes", json=payload)
        logger.info(
            "Issued NFS-e for %s (%s) in %s",
            invoice.customer.name,
            invoice.unit_amount,
            self.config.environment,
            extra={"company_id": company_id},
        )
        return result

    def get_invoice(self, company_id: str, invoice_id: str) -> dict[str, Any]:
        return self._request("GET", f"/v1/empresas/{company_id}/nfes/{invoice_id}")

    def cancel_invoice(self, company_id: str, invoice_id: str, reason: str) -> dict[str, Any]:
        result = self._request(
            "POST",
            f"/v1/empresas/{company_id}/nfes/{invoice_id}/cancelar",
            json={"motivo": reason},
        )
        logger.info(
            "Requested cancellation of NFS-e %s: %s",
            invoice_id,
            reason,
            extra={"company_id": company_id, "invoice_id": invoice_id},
        )
        return result

    # Municipal service codes
    def list_municipal_services(self, uf: str, city: str) -> list[MunicipalService]:
        """List the service codes a municipality accepts on invoices.

        The gateway answers with a list, a list wrapped in an object, or a
        plain ``code -> description`` mapping; all three are normalized.
        """
        if not uf or not uf.strip() or not city or not city.strip():
            raise ValidationError({"uf": "state and city are required"})

        uf = uf.strip().upper()
        city = " ".join(city.split())
        data = self._request(
            "GET",
            f"/v2/estados/{quote(uf, safe='')}/municipios/{quote(city, safe='')}/servicos",
        )

        if not data:
            logger.warning("Empty municipal service list for %s/%s", city, uf)
            return []
        if isinstance(data, dict):
            wrapped = next((data[key] for key in LIST_KEYS if isinstance(data.get(key), list)), None)
            if wrapped is None:
                return [
                    MunicipalService(code=str(code), description=desc if isinstance(desc, str) else "Sem descrição")
                    for code, desc in data.items()
                ]
            data = wrapped
        if isinstance(data, list):
            return [_municipal_service(item) for item in data]

        logger.warning("Unrecognized municipal service response for %s/%s: %r", city, uf, data)
        return []


def _as_list(data: Any) -> list[dict[str, Any]]:
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in LIST_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
    return []


def _municipal_service(item: Any) -> MunicipalService:
    if isinstance(item, dict):
        code = item.get("codigo") or item.get("code") or item.get("id") or ""
        description = item.get("descricao") or item.get("description") or "Sem descrição"
        return MunicipalService(code=str(code), description=str(description))
    return MunicipalService(code=str(item), description="Sem descrição")
