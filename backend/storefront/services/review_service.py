from storefront.repositories.product_repo import ProductRepository
from storefront.repositories.review_repo import ReviewRepository
from storefront.schemas.review_schema import ReviewIn, ReviewOut
from storefront.services.exceptions import NotFoundError
from storefront.store.base import Store


class ReviewService:
    def __init__(self, store: Store):
        self.products = ProductRepository(store)
        self.reviews = ReviewRepository(store)

    def submit_review(self, product_slug: str, data: ReviewIn) -> ReviewOut:
        """Store a review; it stays hidden until an admin approves it."""
        product = self.products.get_by_slug(product_slug)
        if not product:
            raise NotFoundError("Product not found")
        return self.reviews.create(
            {
                "product_id": product.id,
                "customer_name": data.customer_name,
                "customer_email": str(data.customer_email),
                "rating": data.rating,
                "comment": data.comment,
                "approved": False,
            }
        )
