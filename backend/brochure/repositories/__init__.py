from brochure.repositories.user import UserRepository
from brochure.repositories.campaign import CampaignRepository
from brochure.repositories.product import ProductRepository
from brochure.repositories.campaign_product import CampaignProductRepository
from brochure.repositories.template import TemplateRepository
from brochure.repositories.logo import LogoRepository

__all__ = [
    "UserRepository",
    "CampaignRepository",
    "ProductRepository",
    "CampaignProductRepository",
    "TemplateRepository",
    "LogoRepository",
]
