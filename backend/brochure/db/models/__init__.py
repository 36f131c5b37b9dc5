from brochure.db.models.user import User
from brochure.db.models.campaign import Campaign, CampaignStatus
from brochure.db.models.product import Product
from brochure.db.models.campaign_product import CampaignProduct
from brochure.db.models.template import Template
from brochure.db.models.logo import Logo

__all__ = [
    "User",
    "Campaign",
    "CampaignStatus",
    "Product",
    "CampaignProduct",
    "Template",
    "Logo",
]
