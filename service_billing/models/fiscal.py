"""Nota fiscal (NFS-e) and geographic lookup models."""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from service_billing.models.base import Address


@dataclass
class NFSeSettings:
    """Per-environment NFS-e numbering and provider credentials."""

    next_number: int = 1
    series: str = "1"
    next_batch_number: int = 1
    provider_user: str | None = None
    provider_password: str | None = None
    provider_token: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "sequencialNFe": self.next_number,
            "serieNFe": self.series,
            "sequencialLoteNFe": self.next_batch_number,
            "usuarioAcessoProvedor": self.provider_user,
            "senhaAcessoProvedor": self.provider_password,
            "tokenAcessoProvedor": self.provider_token,
        }


@dataclass
class Company:
    """Issuing company (empresa) registered at the invoice gateway."""

    cnpj: str
    municipal_registration: str  # Inscrição municipal
    legal_name: str  # Razão social
    trade_name: str  # Nome fantasia
    email: str
    phone: str
    address: Address
    ibge_state_code: int
    ibge_city_code: int
    municipal_service_code: str
    service_list_item: str  # Item da lista de serviços LC 116
    cnae: str
    iss_rate: Decimal  # Percentage, 0-100
    service_description: str
    simples_nacional: bool = False
    cultural_incentive: bool = False
    email_customer: bool = True
    special_tax_regime: str = "Nenhum"
    state_registration: str | None = None
    id: str | None = None
    homologation: NFSeSettings = field(default_factory=NFSeSettings)
    production: NFSeSettings = field(default_factory=NFSeSettings)

    def to_payload(self) -> dict[str, Any]:
        """Build the gateway's empresa document."""
        return {
            "id": self.id,
            "cnpj": self.cnpj,
            "inscricaoMunicipal": self.municipal_registration,
            "inscricaoEstadual": self.state_registration,
            "razaoSocial": self.legal_name,
            "nomeFantasia": self.trade_name,
            "optanteSimplesNacional": self.simples_nacional,
            "email": self.email,
            "enviarEmailCliente": self.email_customer,
            "telefoneComercial": self.phone,
            "incentivadorCultural": self.cultural_incentive,
            "endereco": {
                "codigoIbgeUf": self.ibge_state_code,
                "codigoIbgeCidade": self.ibge_city_code,
                "pais": "Brasil",
                "uf": self.address.state,
                "cidade": self.address.city,
                "logradouro": self.address.street,
                "numero": self.address.number,
                "complemento": self.address.complement or None,
                "bairro": self.address.neighborhood,
                "cep": self.address.postal_code,
            },
            "regimeEspecialTributacao": self.special_tax_regime,
            "codigoServicoMunicipal": self.municipal_service_code,
            "itemListaServicoLC116": self.service_list_item,
            "cnae": self.cnae,
            "aliquotaIss": float(self.iss_rate),
            "descricaoServico": self.service_description,
            "configuracoesNFSeHomologacao": self.homologation.to_payload(),
            "configuracoesNFSeProducao": self.production.to_payload(),
        }


@dataclass
class InvoiceCustomer:
    """Service taker (tomador) printed on the nota fiscal."""

    name: str
    email: str
    document: str  # CPF or CNPJ
    phone: str | None = None
    address: Address | None = None


@dataclass
class ServiceInvoice:
    """Request to issue one NFS-e."""

    customer: InvoiceCustomer
    description: str
    unit_amount: Decimal
    quantity: int = 1
    external_id: str | None = None  # Our reference, e.g. the order id

    def to_payload(self) -> dict[str, Any]:
        customer: dict[str, Any] = {
            "nome": self.customer.name,
            "email": self.customer.email,
            "cpfCnpj": self.customer.document,
        }
        if self.customer.phone:
            customer["telefone"] = self.customer.phone
        if self.customer.address is not None:
            address = self.customer.address
            customer["endereco"] = {
                "logradouro": address.street,
                "numero": address.number,
                "complemento": address.complement or None,
                "bairro": address.neighborhood,
                "cidade": address.city,
                "estado": address.state,
                "cep": address.postal_code,
            }

        payload: dict[str, Any] = {
            "cliente": customer,
            "servico": {
                "descricao": self.description,
                "valorUnitario": float(self.unit_amount),
                "quantidade": self.quantity,
            },
        }
        if self.external_id:
            payload["idExterno"] = self.external_id
        return payload


@dataclass
class State:
    """Brazilian state (unidade federativa) as listed by IBGE."""

    id: int
    abbreviation: str
    name: str


@dataclass
class Municipality:
    """Municipality as listed by IBGE."""

    id: int
    name: str


@dataclass
class MunicipalService:
    """Entry of a municipality's service code list."""

    code: str
    description: str
