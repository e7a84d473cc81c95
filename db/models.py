from sqlalchemy import Column, Integer, String, Boolean, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship, Mapped
from .database import Base
from typing import List, Optional


# The catalog tables are owned by the hosted database. These mappings only
# describe the columns this service reads.

class Label(Base):
    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, index=True)
    brand_name = Column(String(255), nullable=True, index=True)
    full_name = Column(String(512), nullable=True)
    upc = Column(String(32), nullable=True, index=True)
    product_type = Column(String(255), nullable=True)
    entry_date = Column(DateTime, nullable=True)
    # 1 when the product is no longer sold
    off_market = Column(Integer, default=0)
    thumbnail = Column(Text, nullable=True)
    search_text = Column(Text, nullable=True)

    # Relationships
    products: Mapped[List["CatalogProduct"]] = relationship(back_populates="label")
    verification: Mapped[Optional["Verification"]] = relationship(back_populates="label", uselist=False)
    trustscore: Mapped[Optional["TrustScoreRecord"]] = relationship(back_populates="label", uselist=False)


class CatalogProduct(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    dsld_label_id = Column(Integer, ForeignKey("labels.id"), index=True)
    brand_name = Column(String(255), nullable=True)
    canonical_name = Column(String(512), nullable=True)
    format = Column(String(255), nullable=True)
    product_url = Column(Text, nullable=True)
    image_url = Column(Text, nullable=True)

    label = relationship("Label", back_populates="products")


class Verification(Base):
    __tablename__ = "verification"

    product_id = Column(Integer, ForeignKey("labels.id"), primary_key=True)
    usp_verified = Column(Boolean, default=False)
    informed_sport = Column(Boolean, default=False)
    informed_choice = Column(Boolean, default=False)
    nsf_certified = Column(Boolean, default=False)
    bscg = Column(Boolean, default=False)
    ifos = Column(Boolean, default=False)
    ikos = Column(Boolean, default=False)
    iaos = Column(Boolean, default=False)
    ipro = Column(Boolean, default=False)
    igen = Column(Boolean, default=False)
    clean_label_project_certified = Column(Boolean, default=False)
    non_gmo_certified = Column(Boolean, default=False)
    gf_certified = Column(Boolean, default=False)
    usda_organic_certified = Column(Boolean, default=False)
    vegan_action_certified = Column(Boolean, default=False)
    fda_flagged = Column(Boolean, default=False)
    fda_recall_number = Column(String(255), nullable=True)
    fda_recall_url = Column(Text, nullable=True)

    label = relationship("Label", back_populates="verification")


class TrustScoreRecord(Base):
    __tablename__ = "trustscores"

    product_id = Column(Integer, ForeignKey("labels.id"), primary_key=True)
    score = Column(Integer, nullable=True)
    category = Column(String(64), nullable=True)

    label = relationship("Label", back_populates="trustscore")
