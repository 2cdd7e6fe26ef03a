"""
Contract lifecycle tests.

Covers:
1. Cancellation only after the first contract year
2. Shelf return window and confirmation
3. Extension before the shelf is returned
4. Overdue marking
5. Admin completion removes records and locks the account
"""
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.files.storage import default_storage
from django.utils import timezone

from apps.distributors import services
from apps.distributors.models import (
    Company,
    ContractStatus,
    Distributor,
    ShelfReturnStatus,
    add_months,
)
from apps.products.models import DistributorProduct
from apps.qrcodes import images
from apps.qrcodes import services as qr_services
from apps.qrcodes.models import QRCode
from apps.sales.models import Order, Sale

from tests.factories import make_client, make_qr_code


def mature(distributor):
    distributor.contract_start_date = timezone.now() - timedelta(days=400)
    distributor.save(update_fields=['contract_start_date'])
    return distributor


class TestAddMonths:

    def test_clamps_to_last_day_of_month(self):
        start = timezone.now().replace(year=2023, month=1, day=31)
        shifted = add_months(start, 1)
        assert (shifted.month, shifted.day) == (2, 28)

    def test_twelve_months_is_one_year(self):
        start = timezone.now().replace(year=2024, month=2, day=29)
        shifted = add_months(start, 12)
        assert (shifted.year, shifted.month, shifted.day) == (2025, 2, 28)


@pytest.mark.django_db
class TestCancellationRequest:

    def test_rejected_during_first_year(self, distributor):
        with pytest.raises(services.ContractTransitionError) as exc:
            services.request_cancellation(distributor)

        assert 'one year after the start date' in exc.value.messages[0]
        distributor.refresh_from_db()
        assert distributor.contract_status == ContractStatus.ACTIVE

    def test_opens_shelf_return_window(self, distributor):
        mature(distributor)

        services.request_cancellation(distributor)

        distributor.refresh_from_db()
        assert distributor.contract_status == ContractStatus.CANCELLATION_REQUESTED
        assert distributor.shelf_return_status == ShelfReturnStatus.SCHEDULED
        window = distributor.shelf_return_due_date - distributor.cancellation_request_date
        assert window == timedelta(days=30)

    def test_rejected_when_not_active(self, distributor):
        mature(distributor)
        distributor.contract_status = ContractStatus.SUSPENDED
        distributor.save()

        with pytest.raises(services.ContractTransitionError):
            services.request_cancellation(distributor)

    def test_can_cancel_flag_follows_maturity(self, distributor):
        assert distributor.can_cancel_contract is False
        mature(distributor)
        assert distributor.can_cancel_contract is True


@pytest.mark.django_db
class TestShelfReturnAndExtension:

    def test_confirm_shelf_return(self, distributor):
        services.request_cancellation(mature(distributor))

        services.confirm_shelf_return(distributor)

        distributor.refresh_from_db()
        assert distributor.contract_status == ContractStatus.PENDING_SHELF_RETURN
        assert distributor.shelf_return_status == ShelfReturnStatus.COMPLETED
        assert distributor.shelf_returned_date is not None

    def test_confirm_without_request_is_rejected(self, distributor):
        with pytest.raises(services.ContractTransitionError):
            services.confirm_shelf_return(distributor)

    def test_extend_restores_active_contract(self, distributor):
        services.request_cancellation(mature(distributor))

        services.extend_contract(distributor)

        distributor.refresh_from_db()
        assert distributor.contract_status == ContractStatus.ACTIVE
        assert distributor.cancellation_request_date is None
        assert distributor.shelf_return_due_date is None
        assert distributor.shelf_return_status == ShelfReturnStatus.NOT_REQUIRED

    def test_extend_after_shelf_returned_is_rejected(self, distributor):
        services.request_cancellation(mature(distributor))
        services.confirm_shelf_return(distributor)

        with pytest.raises(services.ContractTransitionError):
            services.extend_contract(distributor)

    def test_mark_overdue_requires_past_due_date(self, distributor):
        services.request_cancellation(mature(distributor))

        with pytest.raises(services.ContractTransitionError):
            services.mark_overdue(distributor)

        distributor.shelf_return_due_date = timezone.now() - timedelta(days=1)
        distributor.save()
        services.mark_overdue(distributor)

        distributor.refresh_from_db()
        assert distributor.shelf_return_status == ShelfReturnStatus.OVERDUE


@pytest.mark.django_db
class TestCompleteCancellation:

    def _returned(self, distributor):
        services.request_cancellation(mature(distributor))
        return services.confirm_shelf_return(distributor)

    def test_requires_returned_shelf(self, distributor):
        with pytest.raises(services.ContractTransitionError):
            services.complete_cancellation(distributor)
        assert Distributor.objects.filter(pk=distributor.pk).exists()

    def test_individual_records_removed_and_user_locked(self, distributor, products, consumer_user):
        qr = make_qr_code(distributor)
        DistributorProduct.objects.create(distributor=distributor, product=products[0])
        order = Order.objects.create(user=consumer_user, distributor=distributor, total_amount=Decimal('100.00'))
        Sale.objects.create(
            order=order,
            distributor=distributor,
            qr_code=qr,
            total_amount=Decimal('100.00'),
            distributor_commission=Decimal('10.00'),
            platform_fee=Decimal('5.00'),
        )
        self._returned(distributor)

        removed = services.complete_cancellation(distributor)

        assert removed == 1
        assert not Distributor.objects.filter(pk=distributor.pk).exists()
        assert not QRCode.objects.filter(pk=qr.pk).exists()
        assert not DistributorProduct.objects.exists()
        sale = Sale.objects.get()
        assert sale.distributor is None
        distributor.user.refresh_from_db()
        assert distributor.user.is_active is False

    def test_head_office_removes_whole_company(self, chain):
        head_office = chain['head_office']
        self._returned(head_office)

        removed = services.complete_cancellation(head_office)

        assert removed == 3
        assert not Distributor.objects.filter(company_id=chain['company'].id).exists()
        assert not Company.objects.filter(pk=chain['company'].pk).exists()
        for user in chain['store_users']:
            user.refresh_from_db()
            assert user.is_active is False

    def test_failed_company_removal_rolls_back(self, chain, products, monkeypatch):
        head_office = chain['head_office']
        locations = [head_office, *chain['stores']]
        for location in locations:
            make_qr_code(location)
            DistributorProduct.objects.create(distributor=location, product=products[0])
        self._returned(head_office)

        remove_distributor = services.remove_distributor
        calls = []

        def remove_then_fail(distributor):
            calls.append(distributor.id)
            if len(calls) == 2:
                raise RuntimeError('storage unavailable')
            remove_distributor(distributor)

        monkeypatch.setattr(services, 'remove_distributor', remove_then_fail)

        with pytest.raises(services.ContractTransitionError) as exc:
            services.complete_cancellation(head_office)

        assert 'storage unavailable' in exc.value.messages[0]
        assert len(calls) == 2
        assert Distributor.objects.filter(company=chain['company']).count() == 3
        assert QRCode.objects.count() == 3
        assert DistributorProduct.objects.count() == 3
        assert Company.objects.filter(pk=chain['company'].pk).exists()
        for user in [chain['owner'], *chain['store_users']]:
            user.refresh_from_db()
            assert user.is_active is True

    def test_store_removed_alone(self, chain):
        store = chain['stores'][0]
        self._returned(store)

        removed = services.complete_cancellation(store)

        assert removed == 1
        assert Distributor.objects.filter(company=chain['company']).count() == 2

    def test_qr_images_removed_after_commit(self, distributor, django_capture_on_commit_callbacks):
        path = images.image_path(qr_services.generate_qr_code(distributor, 'Register 1').code)
        self._returned(distributor)

        with django_capture_on_commit_callbacks(execute=True):
            services.complete_cancellation(distributor)

        assert not default_storage.exists(path)


@pytest.mark.django_db
class TestContractEndpoints:

    def test_list_own_contracts(self, distributor_client, distributor):
        response = distributor_client.get('/api/v1/contracts/')

        assert response.status_code == 200
        assert [c['id'] for c in response.data] == [distributor.id]

    def test_request_cancellation_too_early(self, distributor_client, distributor):
        response = distributor_client.post(f'/api/v1/contracts/{distributor.id}/request-cancellation/')

        assert response.status_code == 400
        assert 'one year' in response.data['error']

    def test_full_flow_through_api(self, distributor_client, distributor, admin_client):
        mature(distributor)

        response = distributor_client.post(f'/api/v1/contracts/{distributor.id}/request-cancellation/')
        assert response.status_code == 200
        assert response.data['contract']['contract_status'] == ContractStatus.CANCELLATION_REQUESTED

        response = distributor_client.post(f'/api/v1/contracts/{distributor.id}/confirm-shelf-return/')
        assert response.status_code == 200
        assert response.data['contract']['shelf_return_status'] == ShelfReturnStatus.COMPLETED

        response = admin_client.post(f'/api/v1/admin/contracts/{distributor.id}/complete-cancellation/')
        assert response.status_code == 200
        assert response.data['removed_locations'] == 1

    def test_cannot_touch_another_users_contract(self, distributor, chain):
        store_client = make_client(chain['store_users'][0])

        response = store_client.post(f'/api/v1/contracts/{distributor.id}/request-cancellation/')

        assert response.status_code == 404

    def test_head_office_sees_company_contracts(self, head_office_client, chain):
        response = head_office_client.get('/api/v1/contracts/')

        assert response.status_code == 200
        assert len(response.data) == 3

    def test_admin_contract_list_has_status_counts(self, admin_client, distributor, chain):
        services.request_cancellation(mature(distributor))

        response = admin_client.get('/api/v1/admin/contracts/', {'status': ContractStatus.CANCELLATION_REQUESTED})

        assert response.status_code == 200
        assert response.data['count'] == 1
        assert response.data['status_counts'][ContractStatus.ACTIVE] == 3
        assert response.data['status_counts'][ContractStatus.CANCELLATION_REQUESTED] == 1

    def test_admin_mark_overdue(self, admin_client, distributor):
        services.request_cancellation(mature(distributor))
        distributor.shelf_return_due_date = timezone.now() - timedelta(days=2)
        distributor.save()

        response = admin_client.post(f'/api/v1/admin/contracts/{distributor.id}/mark-overdue/')

        assert response.status_code == 200
        assert response.data['contract']['shelf_return_status'] == ShelfReturnStatus.OVERDUE

    def test_contract_endpoints_require_distributor_role(self, consumer_client, distributor):
        response = consumer_client.get('/api/v1/contracts/')
        assert response.status_code == 403
