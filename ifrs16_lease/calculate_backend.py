"""
Lease Calculation Backend API
Maps contract-form payloads onto lease terms and returns the engine's
measurement, schedules and journal entries
"""

from flask import Blueprint, request, jsonify, current_app
from dataclasses import replace
from datetime import date
from typing import Optional, Dict, Any
import logging

from ifrs16_lease.accounting import calculate, apply_modification, validate_modification_event
from ifrs16_lease.accounting.core.exceptions import InvalidLeaseDataError, LeaseCalculationError
from ifrs16_lease.accounting.core.lease_modifications import (
    extract_base_contract_id,
    extract_version,
    generate_version_id,
)
from ifrs16_lease.accounting.core.lease_term import parse_option_years
from ifrs16_lease.accounting.core.models import (
    LeaseTerms,
    ModificationEvent,
    ModificationType,
    PaymentFrequency,
    PaymentTiming,
    TermChanges,
)
from ifrs16_lease.accounting.utils.date_utils import parse_date

# Create blueprint
calc_bp = Blueprint('calc', __name__, url_prefix='/api')

logger = logging.getLogger(__name__)

# Payload keys mapped onto LeaseTerms; anything else is kept as an extra field
KNOWN_KEYS = {
    'ContractID', 'CommencementDate', 'Currency', 'FixedPaymentPerPeriod', 'PaymentFrequency',
    'PaymentTiming', 'NonCancellableYears', 'IBR_Annual', 'InitialDirectCosts',
    'PrepaymentsBeforeCommencement', 'LeaseIncentives', 'RenewalOptionYears',
    'RenewalOptionLikelihood', 'TerminationOptionPoint', 'TerminationOptionLikelihood',
    'RVGExpected', 'RVGReasonablyCertain', 'FairValue', 'CarryingAmount', 'SalesProceeds',
    'hasModification', 'originalTerms', 'modifiedTerms', 'modificationDate',
    'modificationReason', 'modificationType',
}


def _parse_number(data: Dict[str, Any], key: str, default: Optional[float] = 0.0) -> Optional[float]:
    """Numeric field from the payload; blanks give the default"""
    value = data.get(key)
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise InvalidLeaseDataError(f"Invalid value for '{key}': {value}. Must be a valid number.")
    try:
        return float(value)
    except (ValueError, TypeError):
        raise InvalidLeaseDataError(f"Invalid value for '{key}': {value}. Must be a valid number.")


def _parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or '').strip().lower() in ('yes', 'on', 'true', '1')


def _parse_frequency(value: Any) -> PaymentFrequency:
    text = str(value or '').strip().lower()
    for frequency in PaymentFrequency:
        if frequency.value.lower() == text:
            return frequency
    if text:
        logger.warning(f"⚠️  Unknown payment frequency '{value}', defaulting to Monthly")
    return PaymentFrequency.MONTHLY


def _parse_timing(value: Any) -> Optional[PaymentTiming]:
    text = str(value or '').strip().lower()
    if text in ('arrears', 'arrear'):
        return PaymentTiming.ARREARS
    if text == 'advance':
        return PaymentTiming.ADVANCE
    return None


def _parse_modification_type(value: Any) -> ModificationType:
    if not value:
        return ModificationType.AMENDMENT
    try:
        return ModificationType(str(value).lower())
    except ValueError:
        raise InvalidLeaseDataError(f"Invalid modification type: {value}. Must be 'amendment' or 'termination'.")


def lease_terms_from_payload(data: Dict[str, Any], default_currency: str = 'NGN',
                             fallback_commencement: Optional[date] = None) -> LeaseTerms:
    """
    Map a contract-form payload onto LeaseTerms
    String-encoded option points are parsed here, once
    """
    commencement = parse_date(data.get('CommencementDate')) or fallback_commencement
    if commencement is None:
        raise InvalidLeaseDataError("Missing or invalid CommencementDate")

    extra_fields = {
        key: str(value) for key, value in data.items()
        if key not in KNOWN_KEYS and value is not None and not isinstance(value, (dict, list))
    }

    return LeaseTerms(
        commencement_date=commencement,
        fixed_payment=_parse_number(data, 'FixedPaymentPerPeriod'),
        frequency=_parse_frequency(data.get('PaymentFrequency')),
        timing=_parse_timing(data.get('PaymentTiming')) or PaymentTiming.ADVANCE,
        ibr_annual=_parse_number(data, 'IBR_Annual', default=None),
        non_cancellable_years=_parse_number(data, 'NonCancellableYears'),
        renewal_option_years=_parse_number(data, 'RenewalOptionYears'),
        renewal_option_likelihood=_parse_number(data, 'RenewalOptionLikelihood'),
        termination_option_point=parse_option_years(data.get('TerminationOptionPoint')),
        termination_option_likelihood=_parse_number(data, 'TerminationOptionLikelihood'),
        initial_direct_costs=_parse_number(data, 'InitialDirectCosts'),
        prepayments_before_commencement=_parse_number(data, 'PrepaymentsBeforeCommencement'),
        lease_incentives=_parse_number(data, 'LeaseIncentives'),
        rvg_expected=_parse_number(data, 'RVGExpected'),
        rvg_reasonably_certain=_parse_flag(data.get('RVGReasonablyCertain')),
        fair_value=_parse_number(data, 'FairValue', default=None),
        carrying_amount=_parse_number(data, 'CarryingAmount', default=None),
        sales_proceeds=_parse_number(data, 'SalesProceeds', default=None),
        contract_id=str(data.get('ContractID') or ''),
        currency=data.get('Currency') or default_currency,
        extra_fields=extra_fields,
    )


def term_changes_from_payload(data: Optional[Dict[str, Any]]) -> Optional[TermChanges]:
    """Only the fields the user actually changed are present"""
    if data is None:
        return None
    return TermChanges(
        fixed_payment=_parse_number(data, 'FixedPaymentPerPeriod', default=None),
        ibr_annual=_parse_number(data, 'IBR_Annual', default=None),
        timing=_parse_timing(data.get('PaymentTiming')),
    )


def calculation_request_from_payload(data: Dict[str, Any], default_currency: str = 'NGN') -> LeaseTerms:
    """
    Lease terms for calculate(); with hasModification the original and
    modified terms travel alongside and select the remeasurement path
    """
    terms = lease_terms_from_payload(data, default_currency)
    if not _parse_flag(data.get('hasModification')):
        return terms

    original_payload = data.get('originalTerms')
    original_terms = None
    if isinstance(original_payload, dict):
        original_terms = lease_terms_from_payload(
            original_payload, terms.currency, fallback_commencement=terms.commencement_date
        )

    modified_payload = data.get('modifiedTerms')
    return replace(
        terms,
        has_modification=True,
        original_terms=original_terms,
        modified_terms=term_changes_from_payload(modified_payload if isinstance(modified_payload, dict) else None),
        modification_date=parse_date(data.get('modificationDate')),
        modification_type=_parse_modification_type(data.get('modificationType')),
        modification_reason=str(data.get('modificationReason') or ''),
    )


def modification_event_from_payload(data: Dict[str, Any]) -> ModificationEvent:
    modification_date = parse_date(data.get('modificationDate'))
    changed = data.get('data')
    if modification_date is None or not isinstance(changed, dict):
        raise InvalidLeaseDataError("Missing required fields: modificationDate and data")

    return ModificationEvent(
        modification_date=modification_date,
        changes=term_changes_from_payload(changed),
        reason=str(data.get('modificationReason') or ''),
        modification_type=_parse_modification_type(data.get('modificationType')),
        agreement_date=parse_date(data.get('agreementDate')),
    )


@calc_bp.route('/calculate_lease', methods=['POST'])
def calculate_lease():
    """
    Main endpoint for lease calculation
    Returns measurement, schedules and journal entries
    """
    try:
        data = request.get_json(silent=True) or {}
        logger.info(f"📥 Received calculation request: contract={data.get('ContractID')}, "
                    f"modification={bool(data.get('hasModification'))}")

        terms = calculation_request_from_payload(data, current_app.config['DEFAULT_CURRENCY'])
        result = calculate(terms, floor_rou_at_zero=current_app.config['ROU_FLOOR_AT_ZERO'])

        logger.info(f"✅ Lease calculated: liability={result.initial_liability:,.2f}, "
                    f"ROU={result.initial_rou:,.2f}, periods={len(result.amortization_schedule)}")
        return jsonify({'success': True, 'result': result.to_dict()})

    except LeaseCalculationError as e:
        logger.warning(f"❌ Calculation rejected: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"❌ Error in calculate_lease: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500


@calc_bp.route('/modify_lease', methods=['POST'])
def modify_lease():
    """
    Remeasure a contract after an amendment or early termination
    Returns the stitched result and the id of the new contract version
    """
    try:
        data = request.get_json(silent=True) or {}
        contract = data.get('contract')
        if not isinstance(contract, dict):
            raise InvalidLeaseDataError("Missing required field: contract")

        terms = lease_terms_from_payload(contract, current_app.config['DEFAULT_CURRENCY'])
        event = modification_event_from_payload(data.get('modification') or {})
        logger.info(f"📥 Received {event.modification_type.value} for {terms.contract_id or 'contract'} "
                    f"effective {event.modification_date.isoformat()}")

        validate_modification_event(event, terms.commencement_date, current_terms=terms)

        result = calculate(apply_modification(terms, event),
                           floor_rou_at_zero=current_app.config['ROU_FLOOR_AT_ZERO'])

        new_contract_id = None
        if terms.contract_id:
            base_contract_id = extract_base_contract_id(terms.contract_id)
            current_version = int(_parse_number(data, 'version', default=extract_version(terms.contract_id)))
            new_contract_id = generate_version_id(base_contract_id, current_version + 1)

        logger.info(f"✅ Modification applied: new liability={result.modification.new_liability:,.2f}, "
                    f"new ROU={result.modification.new_rou:,.2f}")
        return jsonify({
            'success': True,
            'new_contract_id': new_contract_id,
            'modification': event.to_dict(),
            'result': result.to_dict(),
        }), 201

    except LeaseCalculationError as e:
        logger.warning(f"❌ Modification rejected: {e}")
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.error(f"❌ Error in modify_lease: {e}", exc_info=True)
        return jsonify({'error': str(e)}), 500
